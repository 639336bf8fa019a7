"""
Sensitivity advisory analyzer.

A lexical scan for sensitive keywords that recommends encryption. Purely
advisory: the cipher engine never calls it and its output never changes how
content is encrypted.
"""
from typing import Optional

from securecrypt.models import AnalysisResult, RiskLevel

SENSITIVE_KEYWORDS = {
    "financial": (
        "bank", "credit", "debit", "salary", "income", "loan", "finance", "money",
        "transaction", "account", "₹", "$", "€", "£", "payment",
    ),
    "identity": (
        "password", "ssn", "aadhaar", "id", "identity", "passport", "license", "userid",
        "username", "social security", "dob", "birthdate", "birth",
    ),
    "professional": (
        "confidential", "secret", "private", "sensitive", "restricted", "nda", "contract",
        "agreement", "proprietary", "classified",
    ),
    "personal": (
        "address", "phone", "email", "dob", "birthdate", "medical", "health", "insurance",
        "family", "personal", "home",
    ),
}

SENSITIVE_FILE_TYPES = frozenset(
    ("csv", "xls", "xlsx", "pdf", "doc", "docx", "txt", "json", "xml", "sql", "db", "bak")
)

_REASONS = {
    "financial": "Contains financial information ({terms}). For financial privacy, encryption is recommended.",
    "identity": "Contains identity-related information ({terms}). To prevent identity theft, encryption is strongly recommended.",
    "professional": "Contains confidential professional content ({terms}). For maintaining confidentiality, encryption is recommended.",
    "personal": "Contains personal information ({terms}). For privacy protection, encryption is recommended.",
}

_CATEGORY_DETAILS = {
    "financial": (
        "Financial information typically includes banking details, transaction records, or monetary values. "
        "This data could be used for financial fraud if accessed by unauthorized parties. "
    ),
    "identity": (
        "Identity information can include personal identifiers that could be used for identity theft. "
        "Protecting this data is crucial to prevent unauthorized access to your accounts or identity fraud. "
    ),
    "professional": (
        "Professional or business information often includes proprietary data, work products, or confidential agreements. "
        "Encrypting this data helps maintain business confidentiality and protect intellectual property. "
    ),
    "personal": (
        "Personal information includes details about your private life that should be kept confidential. "
        "Encryption helps protect your privacy and prevents unwanted information disclosure. "
    ),
}

NO_MATCH_EXPLANATION = (
    "This content does not appear to contain any sensitive information based on our analysis. "
    "However, you may still choose to encrypt it for additional security."
)


def risk_level_for(score: int) -> RiskLevel:
    if score >= 80:
        return RiskLevel.HIGH
    if score >= 40:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def explain(category: Optional[str], keywords: tuple[str, ...], score: int) -> str:
    if not category or not keywords:
        return "No sensitive information was detected in this content."

    if score > 80:
        likelihood = "a high"
    elif score > 40:
        likelihood = "a moderate"
    else:
        likelihood = "a low"
    explanation = f"There is {likelihood} likelihood ({score}%) that this content contains sensitive {category} information. "
    explanation += _CATEGORY_DETAILS.get(category, "")

    if len(keywords) == 1:
        explanation += f'The term "{keywords[0]}" was detected, which often indicates sensitive information.'
    elif len(keywords) == 2:
        explanation += f'The terms "{keywords[0]}" and "{keywords[1]}" were detected, which often indicate sensitive information.'
    else:
        main_keywords = '", "'.join(keywords[:3])
        explanation += f'Terms like "{main_keywords}", and {len(keywords) - 3} other sensitive indicators were detected.'
    return explanation


def analyze_content(content: str) -> AnalysisResult:
    """
    Scan text for sensitive keywords.

    Matching is a case-insensitive substring test. The primary category is
    the one with the most matches, the earliest category winning ties.
    Confidence grows by 20 per detected keyword, capped at 100.
    """
    lower_content = content.lower()
    detected = []
    primary_category = None
    max_matches = 0

    for category, keywords in SENSITIVE_KEYWORDS.items():
        matches = [keyword for keyword in keywords if keyword.lower() in lower_content]
        detected.extend(matches)
        if len(matches) > max_matches:
            max_matches = len(matches)
            primary_category = category

    if not detected:
        return AnalysisResult(
            reason="No sensitive information detected.",
            detailed_explanation=NO_MATCH_EXPLANATION,
        )

    keywords = tuple(detected)
    score = min(100, len(keywords) * 20)
    terms = ", ".join(keywords[:3]) + ("..." if len(keywords) > 3 else "")
    return AnalysisResult(
        should_encrypt=True,
        confidence_score=score,
        reason=_REASONS[primary_category].format(terms=terms),
        detected_keywords=keywords,
        category=primary_category,
        detailed_explanation=explain(primary_category, keywords, score),
        risk_level=risk_level_for(score),
    )


def analyze_filename(filename: str) -> AnalysisResult:
    """
    Scan a filename: keywords in the stem, plus a boost for file types that
    commonly hold structured or document data.
    """
    stem, dot, extension = filename.rpartition(".")
    if not dot:
        stem, extension = filename, ""
    extension = extension.lower()

    result = analyze_content(stem)
    if extension not in SENSITIVE_FILE_TYPES:
        return result

    if result.confidence_score > 0:
        score = min(100, result.confidence_score + 20)
        return AnalysisResult(
            should_encrypt=result.should_encrypt,
            confidence_score=score,
            reason=f"{result.reason} The file type (.{extension}) often contains sensitive data.",
            detected_keywords=result.detected_keywords,
            category=result.category,
            detailed_explanation=(
                f"{result.detailed_explanation} Additionally, .{extension} files commonly contain "
                "structured data or documents that may hold sensitive information."
            ),
            risk_level=risk_level_for(score),
        )

    return AnalysisResult(
        should_encrypt=True,
        confidence_score=60,
        reason=f"The file type (.{extension}) often contains sensitive data.",
        detected_keywords=result.detected_keywords,
        category=result.category,
        detailed_explanation=(
            f"Files with the .{extension} extension commonly contain structured data or documents that "
            "frequently include sensitive information. While we didn't detect sensitive keywords in the "
            "filename itself, the file type suggests caution is warranted."
        ),
        risk_level=RiskLevel.MEDIUM,
    )
