"""Tests for toto._errors."""

from chirp.errors import NotFound

from toto._errors import ConfigurationError, RouteNotFound, TemplateMissing, TotoError


class TestErrorHierarchy:
    """All toto errors inherit from TotoError."""

    def test_toto_error_is_exception(self) -> None:
        assert issubclass(TotoError, Exception)

    def test_configuration_error_inherits(self) -> None:
        assert issubclass(ConfigurationError, TotoError)

    def test_template_missing_inherits(self) -> None:
        assert issubclass(TemplateMissing, TotoError)

    def test_catch_all_toto_errors(self) -> None:
        """All specific errors are catchable via TotoError."""
        for error_cls in (ConfigurationError, TemplateMissing):
            try:
                raise error_cls("test")
            except TotoError:
                pass  # Expected: all caught by base class

    def test_route_not_found_is_chirp_not_found(self) -> None:
        assert RouteNotFound is NotFound
