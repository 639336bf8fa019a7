import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from securecrypt.models import OperationEvent, RiskLevel
from securecrypt.utils.analyzer import analyze_content, analyze_filename, risk_level_for
from securecrypt.utils.strength import evaluate_password_strength


# -----------------------------
# Content analysis
# -----------------------------
def test_no_sensitive_content():
    result = analyze_content("hello world")

    assert not result.should_encrypt
    assert result.confidence_score == 0
    assert result.category is None
    assert result.detected_keywords == ()
    assert result.risk_level is RiskLevel.LOW
    assert result.reason == "No sensitive information detected."


def test_financial_content():
    result = analyze_content("My BANK account")

    assert result.should_encrypt
    assert result.category == "financial"
    assert result.detected_keywords == ("bank", "account")
    assert result.confidence_score == 40
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.reason.startswith("Contains financial information (bank, account).")
    assert 'The terms "bank" and "account" were detected' in result.detailed_explanation


def test_identity_content():
    result = analyze_content("my passport and ssn")

    assert result.category == "identity"
    assert result.detected_keywords == ("ssn", "passport")
    assert "strongly recommended" in result.reason


def test_high_confidence_content():
    result = analyze_content("confidential secret private salary password")

    assert result.category == "professional"
    assert result.confidence_score == 100
    assert result.risk_level is RiskLevel.HIGH
    assert result.reason.endswith("For maintaining confidentiality, encryption is recommended.")
    assert "..." in result.reason
    assert result.detailed_explanation.startswith("There is a high likelihood (100%)")


def test_category_tie_goes_to_first_category():
    result = analyze_content("bank phone")
    assert result.category == "financial"
    assert result.detected_keywords == ("bank", "phone")


def test_result_is_immutable():
    result = analyze_content("bank")
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.should_encrypt = False


@pytest.mark.parametrize("score, level", [
    (0, RiskLevel.LOW), (39, RiskLevel.LOW), (40, RiskLevel.MEDIUM), (79, RiskLevel.MEDIUM),
    (80, RiskLevel.HIGH), (100, RiskLevel.HIGH),
])
def test_risk_levels(score, level):
    assert risk_level_for(score) is level


# -----------------------------
# Filename analysis
# -----------------------------
def test_plain_filename():
    result = analyze_filename("sunset.png")
    assert not result.should_encrypt
    assert result.confidence_score == 0


def test_sensitive_file_type_only():
    result = analyze_filename("notes.CSV")

    assert result.should_encrypt
    assert result.confidence_score == 60
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.reason == "The file type (.csv) often contains sensitive data."


def test_keywords_and_file_type_boost():
    result = analyze_filename("bank_statement.pdf")

    assert result.category == "financial"
    assert result.confidence_score == 40
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.reason.endswith("The file type (.pdf) often contains sensitive data.")
    assert result.detailed_explanation.endswith(
        "Additionally, .pdf files commonly contain structured data or documents that may hold sensitive information."
    )


def test_filename_without_extension():
    result = analyze_filename("passport")
    assert result.category == "identity"
    assert result.confidence_score == 20


# -----------------------------
# Password strength
# -----------------------------
@pytest.mark.parametrize("password, score, feedback", [
    ("", 0, "Enter a password"),
    ("abc", 0, "Password is too short"),
    ("password", 0, "Weak password"),
    ("abcdefgh1234", 2, "Medium strength password"),
    ("Tr0ub4dor&3xyzAB", 4, "Very strong password"),
])
def test_password_strength(password, score, feedback):
    strength = evaluate_password_strength(password)
    assert strength.score == score
    assert strength.feedback == feedback


# -----------------------------
# Statistics observer
# -----------------------------
def test_stats_counts_operations(stats):
    stats(OperationEvent(operation="encrypt", kind="text"))
    stats(OperationEvent(operation="encrypt", kind="file"))
    stats(OperationEvent(operation="decrypt", kind="text"))

    snapshot = stats.snapshot()
    assert snapshot["total_operations"] == 3
    assert snapshot["text_encrypted"] == 1
    assert snapshot["files_encrypted"] == 1


def test_stats_records_analysis(stats):
    stats.record_analysis(analyze_content("my bank account"))
    stats.record_analysis(analyze_content("hello world"))
    stats.record_analysis(analyze_filename("notes.csv"))

    assert stats.sensitive_content_detected == 1
    assert stats.category_count["financial"] == 1
    assert stats.sensitive_percentage == 0

    stats.record(OperationEvent(operation="encrypt", kind="text"))
    stats.record(OperationEvent(operation="encrypt", kind="text"))
    stats.record(OperationEvent(operation="encrypt", kind="text"))
    assert stats.sensitive_percentage == 33


def test_stats_thread_safety(stats):
    event = OperationEvent(operation="encrypt", kind="text")
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: stats(event), range(1000)))
    assert stats.total_operations == 1000
    assert stats.text_encrypted == 1000
