"""
Tests for coinbase_connection/coinbase_api/scopes.py
"""

import pytest

from coinbase_connection.coinbase_api.scopes import has_correct_scopes
from coinbase_connection.exceptions import PermissionsError

READ = "wallet:accounts:read"
USER = "wallet:user:read"
TRADE = "wallet:buys:create"


class TestHasCorrectScopes:
    """Tests for has_correct_scopes()"""

    def test_both_empty(self):
        assert has_correct_scopes([], []) is True

    def test_exact_match(self):
        assert has_correct_scopes([READ, USER], [USER, READ]) is True

    def test_missing_scope_raises(self):
        """Failure: a required scope that was not granted."""
        with pytest.raises(PermissionsError, match="Insufficient permissions: add wallet:accounts:read") as exc_info:
            has_correct_scopes([READ], [])

        assert exc_info.value.missing == [READ]

    def test_extra_scope_raises_when_exact(self):
        """Failure: granted scopes beyond the required ones."""
        with pytest.raises(PermissionsError, match="Superfluous permissions: remove wallet:buys:create") as exc_info:
            has_correct_scopes([READ], [READ, TRADE])

        assert exc_info.value.extra == [TRADE]

    def test_extra_scope_allowed_when_not_exact(self):
        assert has_correct_scopes([READ], [READ, TRADE], fail_if_not_exact=False) is True
        assert has_correct_scopes([], [READ], fail_if_not_exact=False) is True

    def test_missing_checked_before_extra(self):
        """Edge case: missing scopes win even when extras exist too."""
        with pytest.raises(PermissionsError, match="Insufficient") as exc_info:
            has_correct_scopes([READ], [TRADE])

        assert exc_info.value.missing == [READ]

    def test_missing_fails_even_when_not_exact(self):
        with pytest.raises(PermissionsError, match="Insufficient"):
            has_correct_scopes([READ, USER], [READ], fail_if_not_exact=False)

    def test_duplicates_compared_as_sets(self):
        """Edge case: repeated scopes do not count as missing or extra."""
        assert has_correct_scopes([READ, READ], [READ]) is True
        assert has_correct_scopes([READ], [READ, READ]) is True

    def test_lists_every_missing_scope_once(self):
        with pytest.raises(PermissionsError) as exc_info:
            has_correct_scopes([READ, USER, READ], [])

        assert exc_info.value.missing == [READ, USER]
        assert str(exc_info.value) == f"Insufficient permissions: add {READ},{USER}"

    @pytest.mark.parametrize("fail_if_not_exact", [True, False])
    @pytest.mark.parametrize(
        "required,granted",
        [
            ([], []),
            ([READ], [READ]),
            ([READ], [USER]),
            ([READ, USER], [READ]),
            ([READ], [READ, USER]),
            ([], [TRADE]),
        ],
    )
    def test_true_iff_subset_rules_hold(self, required, granted, fail_if_not_exact):
        expected = set(required) <= set(granted) and (not fail_if_not_exact or set(granted) <= set(required))

        try:
            result = has_correct_scopes(required, granted, fail_if_not_exact=fail_if_not_exact)
        except PermissionsError:
            result = False

        assert result is expected
