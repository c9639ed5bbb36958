"""Tests for the Result / DomainError types."""

import pytest

from squad_picker.domain.common import DomainError, ErrorType, Result


class TestResult:
    """Test Result success/failure behaviour."""

    def test_success(self):
        result = Result.success(5)

        assert result.is_success
        assert not result.is_failure
        assert result.value == 5
        with pytest.raises(ValueError):
            result.error

    def test_failure(self):
        result = Result.failure(DomainError.infeasible("no team", error_code="x"))

        assert result.is_failure
        assert result.error.error_type == ErrorType.INFEASIBLE
        assert result.error.error_code == "x"
        with pytest.raises(ValueError, match="no team"):
            result.value

    def test_success_may_hold_none(self):
        assert Result.success(None).is_success

    def test_value_and_error_together_rejected(self):
        with pytest.raises(ValueError):
            Result(value=1, error=DomainError.calculation_error("bad"))

    def test_calculation_error(self):
        error = DomainError.calculation_error("boom", details={"slot": "gk1"})

        assert error.error_type == ErrorType.CALCULATION_ERROR
        assert error.details == {"slot": "gk1"}
        assert Result.failure(error).is_failure
