import json
import os
from pathlib import Path
from typing import Optional

from securecrypt.core import decrypt, decrypt_file, encrypt, encrypt_file
from securecrypt.models import AnalysisResult, DerivationParams, EncryptedEnvelope, RiskLevel, bcolors
from securecrypt.utils.analyzer import analyze_content, analyze_filename
from securecrypt.utils.content import decrypted_filename, encrypted_filename
from securecrypt.utils.envelope import parse_envelope, serialize_envelope
from securecrypt.utils.stats import EncryptionStats
from securecrypt.utils.strength import evaluate_password_strength

_RISK_COLORS = {
    RiskLevel.LOW: bcolors.OKGREEN,
    RiskLevel.MEDIUM: bcolors.WARNING,
    RiskLevel.HIGH: bcolors.FAIL,
}

# -----------------------------
# Output Helpers
# -----------------------------
def require_password(password: Optional[str]) -> str:
    if not password:
        raise ValueError(f"{bcolors.FAIL}Password required{bcolors.ENDC}")
    return password

def write_envelope(envelope: EncryptedEnvelope, out_file: Optional[str] = None) -> Optional[str]:
    """Write the pretty-printed JSON envelope to out_file, or print it when no file is given."""
    text = serialize_envelope(envelope, indent=2)
    if not out_file:
        print(text)
        return None
    with open(out_file, "w") as f:
        f.write(text)
    print(f"Encrypted to {out_file}")
    return out_file

def read_envelope(encfile: str) -> EncryptedEnvelope:
    with open(encfile, "r") as f:
        return parse_envelope(f.read())

def write_decrypted_file(envelope: EncryptedEnvelope, password: str, options: DerivationParams,
                         encfile: str, out_dir: str = ".", stats: Optional[EncryptionStats] = None) -> str:
    result = decrypt_file(envelope, password, options, observer=stats)
    name = result.filename or decrypted_filename(Path(encfile).name)
    out_path = os.path.join(out_dir, os.path.basename(name))
    with open(out_path, "wb") as f:
        f.write(result.data)
    print(f"Decrypted to {out_path} ({len(result.data)} bytes, {result.mime_type or 'unknown type'})")
    return out_path

def print_analysis(result: AnalysisResult):
    color = _RISK_COLORS[result.risk_level]
    print(f"{bcolors.BOLD}Sensitivity:{bcolors.ENDC} {color}{result.risk_level.value}{bcolors.ENDC} "
          f"({result.confidence_score}% confidence)")
    print(result.reason)
    if result.detected_keywords:
        print(f"{bcolors.GREY}Detected: {', '.join(result.detected_keywords)}{bcolors.ENDC}")
    print(result.detailed_explanation)
    if result.should_encrypt:
        print(f"{bcolors.WARNING}Encryption recommended.{bcolors.ENDC}")

def print_stats(stats: EncryptionStats):
    snapshot = stats.snapshot()
    print(f"{bcolors.BOLD}Session statistics{bcolors.ENDC}")
    print(f"Total operations:           {snapshot['total_operations']}")
    print(f"Files encrypted:            {snapshot['files_encrypted']}")
    print(f"Text encrypted:             {snapshot['text_encrypted']}")
    print(f"Sensitive content detected: {snapshot['sensitive_content_detected']} "
          f"({snapshot['sensitive_percentage']}%)")
    for category, count in snapshot["category_count"].items():
        print(f"  {category:<13} {count}")

# -----------------------------
# Interactive Configuration Helpers
# -----------------------------
def options() -> DerivationParams:
    """
    Interactive derivation parameter prompts.

    Blank answers keep the DerivationParams defaults. Iteration counts below
    the floor are clamped by the engine, not here.
    """
    iterations = int(input(f"PBKDF2 iterations (default {DerivationParams.iterations}): ").strip()
                     or DerivationParams.iterations)
    key_length = int(input(f"Key length 128/192/256 bits (default {DerivationParams.key_length_bits}): ").strip()
                     or DerivationParams.key_length_bits)
    return DerivationParams(iterations=iterations, key_length_bits=key_length)

# -----------------------------
# CLI Main with Interactive Menu
# -----------------------------
def menu_encrypt_text(stats: EncryptionStats):
    message = input("Message to encrypt: ")
    analysis = analyze_content(message)
    stats.record_analysis(analysis)
    if analysis.should_encrypt:
        print_analysis(analysis)

    password = require_password(input("Password: "))
    vp = options()
    out_file = input("Output filename (blank = print): ").strip() or None
    write_envelope(encrypt(message, password, vp, observer=stats), out_file)

def menu_decrypt_text(stats: EncryptionStats):
    encfile = input("Encrypted file (blank = paste JSON): ").strip() or None
    if encfile is None:
        envelope = parse_envelope(input("Encrypted JSON: "))
    elif not os.path.exists(encfile):
        print("Encrypted file not found.")
        return
    else:
        envelope = read_envelope(encfile)

    password = require_password(input("Password: "))
    # Only consulted for envelopes without embedded parameters
    vp = options() if envelope.params is None else None
    plaintext = decrypt(envelope, password, vp, observer=stats)
    print("Decrypted message:", plaintext)

    analysis = analyze_content(plaintext)
    stats.record_analysis(analysis)
    if analysis.should_encrypt:
        print_analysis(analysis)

def menu_encrypt_file(stats: EncryptionStats):
    in_path = input("File to encrypt: ").strip()
    if not os.path.isfile(in_path):
        print("Input file not found.")
        return

    analysis = analyze_filename(os.path.basename(in_path))
    stats.record_analysis(analysis)
    print_analysis(analysis)

    password = require_password(input("Password: "))
    vp = options()
    default_out = encrypted_filename(in_path)
    out_file = input(f"Output filename (default {default_out}): ").strip() or default_out
    write_envelope(encrypt_file(in_path, password, vp, observer=stats), out_file)

def menu_decrypt_file(stats: EncryptionStats):
    encfile = input("Encrypted file to decrypt: ").strip()
    if not os.path.exists(encfile):
        print("Encrypted file not found.")
        return
    envelope = read_envelope(encfile)

    password = require_password(input("Password: "))
    vp = options() if envelope.params is None else None
    out_dir = input("Output directory (default .): ").strip() or "."
    write_decrypted_file(envelope, password, vp, encfile, out_dir, stats)

def menu_analyze(stats: EncryptionStats):
    target = input("Text to analyze (prefix with @ to analyze a filename): ")
    if target.startswith("@"):
        result = analyze_filename(target[1:].strip())
    else:
        result = analyze_content(target)
    stats.record_analysis(result)
    print_analysis(result)

def menu_password_strength():
    strength = evaluate_password_strength(input("Password to evaluate: "))
    print(f"Score {strength.score}/4: {strength.feedback}")

def menu_show_stats(stats: EncryptionStats):
    print_stats(stats)
    if input("Export as JSON? (y/n) [n]: ").strip().lower() == "y":
        print(json.dumps(stats.snapshot(), indent=2))
