"""Unit tests for the entry point's run mode dispatch."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from attrangi import main as entry


class TestMain:
    """Tests for choosing the run mode from configuration."""

    def test_integrated_mode_runs_backend(self) -> None:
        """RUN_MODE=integrated starts the combined server."""
        with (
            patch.dict("os.environ", {"RUN_MODE": "Integrated"}, clear=True),
            patch.object(entry, "run_integrated") as run_integrated,
            patch.object(entry, "run_client") as run_client,
        ):
            entry.main()

        run_integrated.assert_called_once_with()
        run_client.assert_not_called()

    def test_default_mode_runs_client(self) -> None:
        """Without RUN_MODE only the client UI starts."""
        with (
            patch.dict("os.environ", {}, clear=True),
            patch.object(entry, "run_integrated") as run_integrated,
            patch.object(entry, "run_client") as run_client,
        ):
            entry.main()

        run_client.assert_called_once_with()
        run_integrated.assert_not_called()

    def test_unknown_mode_is_rejected(self) -> None:
        """An invalid RUN_MODE fails config validation before anything starts."""
        with (
            patch.dict("os.environ", {"RUN_MODE": "separate"}, clear=True),
            patch.object(entry, "run_client") as run_client,
        ):
            with pytest.raises(ValidationError):
                entry.main()

        run_client.assert_not_called()
