"""
Tests for the noise filter.
"""

from subtracker.services.spam_filter import is_noise
from subtracker.utils.patterns import DEFAULT_TABLES, PatternTables


class TestSpamPhrasing:

    def test_prize_mail_is_noise(self):
        text = "Congratulations, you won a free trial! Claim your prize today."
        assert is_noise(text, "dealsnow.biz", DEFAULT_TABLES)

    def test_act_now(self):
        assert is_noise("Only 2 seats left. Act now!", "example.com", DEFAULT_TABLES)

    def test_limited_time_offer(self):
        assert is_noise("A limited time offer just for you", "example.com", DEFAULT_TABLES)

    def test_renewal_is_not_noise(self):
        text = "Your Netflix subscription has been renewed for $15.99/month."
        assert not is_noise(text, "netflix.com", DEFAULT_TABLES)

    def test_word_boundaries(self):
        # "contract now" contains "act now" only inside a word
        assert not is_noise("Sign the contract now", "example.com", DEFAULT_TABLES)


class TestDisposableDomains:

    def test_disposable_sender(self):
        assert is_noise("Your subscription has been renewed", "mailinator.com", DEFAULT_TABLES)

    def test_disposable_subdomain(self):
        assert is_noise("Welcome", "inbox.guerrillamail.org", DEFAULT_TABLES)

    def test_empty_domain(self):
        assert not is_noise("Welcome", "", DEFAULT_TABLES)

    def test_substituted_tables(self):
        tables = PatternTables(
            detection_patterns=DEFAULT_TABLES.detection_patterns,
            spam_patterns=(),
            disposable_domains=(),
        )
        assert not is_noise("Congratulations you won! Act now!", "mailinator.com", tables)
