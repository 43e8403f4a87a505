"""
Property-based tests for the audit logger.

Covers the output formats, the minimum level filter, masking of provider
credentials and the error context attached by log_error.
"""

import json
from io import StringIO

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from domain_resolver.audit_logger import AuditLogger
from domain_resolver.enums import LogLevel
from domain_resolver.exceptions import ProviderError, RateLimitedError


# Strategies for generating valid test data

@st.composite
def log_level_strategy(draw) -> LogLevel:
    """Generate valid LogLevel values."""
    return draw(st.sampled_from(list(LogLevel)))


@st.composite
def component_name_strategy(draw) -> str:
    """Generate valid component names."""
    return draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-"),
        min_size=1,
        max_size=50,
    ))


@st.composite
def message_strategy(draw) -> str:
    """Generate valid log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Z'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=200,
    ))


@st.composite
def non_sensitive_key_strategy(draw) -> str:
    """Generate keys that are NOT sensitive."""
    key = draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"),
        min_size=1,
        max_size=20,
    ))

    # Ensure key doesn't contain any sensitive pattern
    for pattern in AuditLogger.SENSITIVE_KEYS:
        assume(pattern not in key)

    return key


@st.composite
def sensitive_key_strategy(draw) -> str:
    """Generate keys that ARE sensitive."""
    base_keys = [
        'token', 'secret', 'password', 'api_key', 'apikey',
        'auth', 'authorization', 'credential', 'credentials',
        'private_key', 'access_token', 'X-RapidAPI-Key',
    ]

    base = draw(st.sampled_from(base_keys))

    # Optionally add prefix/suffix
    prefix = draw(st.sampled_from(['', 'domainr_', 'whois_', 'provider_']))
    suffix = draw(st.sampled_from(['', '_value', '_data', '_1']))

    return f"{prefix}{base}{suffix}"


@st.composite
def simple_value_strategy(draw):
    """Generate simple JSON-serializable values."""
    return draw(st.one_of(
        st.text(min_size=0, max_size=50),
        st.integers(min_value=-1000, max_value=1000),
        st.floats(allow_nan=False, allow_infinity=False, min_value=-1000, max_value=1000),
        st.booleans(),
        st.none(),
    ))


@st.composite
def non_sensitive_data_strategy(draw) -> dict:
    """Generate data dictionaries without sensitive keys."""
    num_keys = draw(st.integers(min_value=0, max_value=5))
    data = {}
    for _ in range(num_keys):
        key = draw(non_sensitive_key_strategy())
        value = draw(simple_value_strategy())
        data[key] = value
    return data


class TestOutputFormats:
    """Every entry is written as a JSON line, a text line, or both."""

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
        data=non_sensitive_data_strategy(),
    )
    @settings(max_examples=100, deadline=None)
    def test_dual_format_produces_both_outputs(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: dict,
    ) -> None:
        """
        With output_format "both", each entry yields one valid JSON line
        followed by one human-readable text line.
        """
        output = StringIO()
        logger = AuditLogger(output_format="both", output_stream=output, min_level=LogLevel.DEBUG)

        logger.log(level, component, message, data)

        lines = output.getvalue().rstrip('\n').split('\n')

        # Should have exactly 2 lines (JSON and text)
        assert len(lines) == 2, f"Expected 2 lines, got {len(lines)}"

        parsed_json = json.loads(lines[0])
        assert parsed_json["level"] == level.value
        assert parsed_json["component"] == component
        assert parsed_json["message"] == message
        assert parsed_json["data"] == data
        assert "timestamp" in parsed_json

        text_line = lines[1]
        assert level.value.upper() in text_line
        assert component in text_line
        assert message in text_line

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100, deadline=None)
    def test_json_only_format(self, level: LogLevel, component: str, message: str) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output, min_level=LogLevel.DEBUG)

        logger.log(level, component, message)

        lines = output.getvalue().rstrip('\n').split('\n')
        assert len(lines) == 1
        parsed = json.loads(lines[0])
        assert parsed["level"] == level.value
        assert parsed["message"] == message

    def test_invalid_format_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")


class TestLevelFilter:
    """Entries below the minimum level are neither written nor kept."""

    @given(
        min_level=log_level_strategy(),
        level=log_level_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100, deadline=None)
    def test_filter_by_rank(self, min_level: LogLevel, level: LogLevel, message: str) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="text", output_stream=output, min_level=min_level)

        entry = logger.log(level, "Test", message)

        if level.rank >= min_level.rank:
            assert entry is not None
            assert logger.entries == [entry]
            assert output.getvalue()
        else:
            assert entry is None
            assert logger.entries == []
            assert output.getvalue() == ""

    def test_from_config(self) -> None:
        logger = AuditLogger.from_config("WARN", "json", output_stream=StringIO())
        assert logger.min_level == LogLevel.WARN
        assert logger.output_format == "json"
        assert logger.info("Test", "dropped") is None
        assert logger.warn("Test", "kept") is not None

    def test_from_config_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger.from_config("verbose", "text")

    def test_history_is_bounded(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        for i in range(AuditLogger.HISTORY_SIZE + 5):
            logger.info("Test", f"entry {i}")
        entries = logger.entries
        assert len(entries) == AuditLogger.HISTORY_SIZE
        assert entries[-1].message == f"entry {AuditLogger.HISTORY_SIZE + 4}"

        logger.clear_entries()
        assert logger.entries == []


class TestSensitiveDataMasking:
    """Credential values never reach the log output."""

    @given(
        key=sensitive_key_strategy(),
        secret_value=st.text(
            alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789"),
            min_size=12,
            max_size=40,
        ),
        data=non_sensitive_data_strategy(),
    )
    @settings(max_examples=100, deadline=None)
    def test_sensitive_values_are_masked(self, key: str, secret_value: str, data: dict) -> None:
        assume(all(secret_value not in str(k) + str(v) for k, v in data.items()))
        output = StringIO()
        logger = AuditLogger(output_format="both", output_stream=output)

        entry = logger.info("DomainrProvider", "request", {**data, key: secret_value})

        assert entry.data[key] == AuditLogger.MASK_VALUE
        assert secret_value not in output.getvalue()
        for other_key, value in data.items():
            assert entry.data[other_key] == value

    @given(
        key=sensitive_key_strategy(),
        secret_value=st.text(
            alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789"),
            min_size=12,
            max_size=40,
        ),
    )
    @settings(max_examples=50, deadline=None)
    def test_nested_values_are_masked(self, key: str, secret_value: str) -> None:
        logger = AuditLogger(output_stream=StringIO())

        masked = logger.mask_sensitive_data({
            "request": {"headers": {key: secret_value}},
            "attempts": [{key: secret_value, "provider": "domainr"}],
        })

        assert masked["request"]["headers"][key] == AuditLogger.MASK_VALUE
        assert masked["attempts"][0][key] == AuditLogger.MASK_VALUE
        assert masked["attempts"][0]["provider"] == "domainr"

    @given(data=non_sensitive_data_strategy())
    @settings(max_examples=100, deadline=None)
    def test_non_sensitive_data_is_unchanged(self, data: dict) -> None:
        logger = AuditLogger(output_stream=StringIO())
        assert logger.mask_sensitive_data(data) == data


class TestErrorContext:

    def test_log_error_includes_error_fields(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        error = ProviderError(provider="rdap", code="server_error", message="rdap server error: 503")

        entry = logger.log_error(
            "FallbackResolver",
            "rdap failed",
            error=error,
            request_url="https://rdap.verisign.com/com/v1/domain/example.com",
            response_status_code=503,
            additional_data={"domain": "example.com"},
        )

        assert entry.level == LogLevel.ERROR
        assert entry.data["error_message"] == "rdap server error: 503"
        assert entry.data["error_type"] == "ProviderError"
        assert entry.data["error_code"] == "server_error"
        assert entry.data["response_status_code"] == 503
        assert entry.data["domain"] == "example.com"
        assert "request_url" in entry.data

    def test_log_error_level_override(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.log_error(
            "FallbackResolver",
            "whois rate limited",
            error=RateLimitedError(provider="whois", message="limit exceeded"),
            level=LogLevel.WARN,
        )
        assert entry.level == LogLevel.WARN
        assert entry.data["error_code"] == "rate_limited"

    def test_log_error_without_exception(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.log_error("CLI", "something failed")
        assert entry.data == {}
