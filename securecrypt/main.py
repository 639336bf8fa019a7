import argparse
import logging
import os
import sys

from securecrypt.core import decrypt, encrypt, encrypt_file
from securecrypt.models import DerivationParams, bcolors
from securecrypt.utils.analyzer import analyze_content, analyze_filename
from securecrypt.utils.content import encrypted_filename
from securecrypt.utils.menu import (
    menu_analyze, menu_decrypt_file, menu_decrypt_text, menu_encrypt_file, menu_encrypt_text,
    menu_password_strength, menu_show_stats, print_analysis, read_envelope, require_password,
    write_decrypted_file, write_envelope
)
from securecrypt.utils.stats import EncryptionStats
from securecrypt.utils.strength import evaluate_password_strength


def add_params_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--iterations", type=int, default=DerivationParams.iterations,
                        help="PBKDF2 iterations (minimum 100000)")
    parser.add_argument("--key_length", type=int, choices=[128, 192, 256], default=DerivationParams.key_length_bits,
                        help="AES key length in bits")


def params_from_args(args) -> DerivationParams:
    return DerivationParams(iterations=args.iterations, key_length_bits=args.key_length)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SecureCrypt - password-based local encryption")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt text")
    encrypt_parser.add_argument("--password", required=True, help="Encryption password")
    encrypt_parser.add_argument("--text", help="Text to encrypt")
    encrypt_parser.add_argument("--in_path", help="Read the text to encrypt from a UTF-8 file")
    encrypt_parser.add_argument("--out_file", help="Envelope output file (default: stdout)")
    add_params_arguments(encrypt_parser)

    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt a text envelope")
    decrypt_parser.add_argument("--password", required=True, help="Decryption password")
    decrypt_parser.add_argument("--encfile", default="encrypted.json", help="Envelope file")
    decrypt_parser.add_argument("--out_file", help="Plaintext output file (default: stdout)")
    add_params_arguments(decrypt_parser)

    encrypt_file_parser = subparsers.add_parser("encrypt_file", help="Encrypt a file")
    encrypt_file_parser.add_argument("--password", required=True, help="Encryption password")
    encrypt_file_parser.add_argument("--in_path", required=True, help="Input file path")
    encrypt_file_parser.add_argument("--out_file", help="Envelope output file (default: <in_path>.encrypted)")
    add_params_arguments(encrypt_file_parser)

    decrypt_file_parser = subparsers.add_parser("decrypt_file", help="Decrypt a file envelope")
    decrypt_file_parser.add_argument("--password", required=True, help="Decryption password")
    decrypt_file_parser.add_argument("--encfile", required=True, help="Envelope file")
    decrypt_file_parser.add_argument("--out_dir", default=".", help="Directory for the restored file")
    add_params_arguments(decrypt_file_parser)

    analyze_parser = subparsers.add_parser("analyze", help="Check content for sensitive information")
    analyze_parser.add_argument("--text", help="Text to analyze")
    analyze_parser.add_argument("--filename", help="Filename to analyze")

    strength_parser = subparsers.add_parser("strength", help="Evaluate password strength")
    strength_parser.add_argument("--password", required=True, help="Password to evaluate")

    return parser


def interactive_menu():
    stats = EncryptionStats()
    _=os.system("cls") | os.system("clear")
    while True:
        print(f"{bcolors.WARNING}{bcolors.BOLD}SecureCrypt - password-based local encryption{bcolors.ENDC}")
        print(f"{bcolors.GREY}{bcolors.BOLD}(]≡≡≡≡ø‡»{bcolors.OKCYAN}========================================-{bcolors.ENDC}")
        print("")
        print(f"{bcolors.BOLD}1){bcolors.ENDC} Encrypt text")
        print(f"{bcolors.BOLD}2){bcolors.ENDC} Decrypt text")
        print(f"{bcolors.BOLD}3){bcolors.ENDC} Encrypt file")
        print(f"{bcolors.BOLD}4){bcolors.ENDC} Decrypt file")
        print(f"{bcolors.BOLD}5){bcolors.ENDC} Analyze content for sensitive information")
        print(f"{bcolors.BOLD}6){bcolors.ENDC} Evaluate password strength")
        print(f"{bcolors.BOLD}7){bcolors.ENDC} Show session statistics")
        print(f"{bcolors.BOLD}0){bcolors.ENDC} Exit")
        print("")
        choice = input(f"{bcolors.BOLD}Choice: {bcolors.ENDC}").strip()
        try:
            match choice:
                case "0":
                    break
                case "1":
                    menu_encrypt_text(stats)
                case "2":
                    menu_decrypt_text(stats)
                case "3":
                    menu_encrypt_file(stats)
                case "4":
                    menu_decrypt_file(stats)
                case "5":
                    menu_analyze(stats)
                case "6":
                    menu_password_strength()
                case "7":
                    menu_show_stats(stats)
                case _:
                    print("Invalid choice")
        except Exception as e:
            print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e)
        _=input(f"{bcolors.OKGREEN}Enter to continue...{bcolors.ENDC}")
        _=os.system("cls") | os.system("clear")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_known_args(argv)[0]

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        match args.command:
            case "encrypt":
                if args.in_path:
                    with open(args.in_path, "r", encoding="utf-8") as f:
                        message = f.read()
                elif args.text is not None:
                    message = args.text
                else:
                    raise ValueError(f"{bcolors.FAIL}Message required for text mode{bcolors.ENDC}")
                envelope = encrypt(message, require_password(args.password), params_from_args(args))
                write_envelope(envelope, args.out_file)
            case "decrypt":
                envelope = read_envelope(args.encfile)
                plaintext = decrypt(envelope, require_password(args.password), params_from_args(args))
                if args.out_file:
                    with open(args.out_file, "w", encoding="utf-8") as f:
                        f.write(plaintext)
                    print(f"Decrypted to {args.out_file}")
                else:
                    print(plaintext)
            case "encrypt_file":
                envelope = encrypt_file(args.in_path, require_password(args.password), params_from_args(args))
                write_envelope(envelope, args.out_file or encrypted_filename(args.in_path))
            case "decrypt_file":
                write_decrypted_file(
                    read_envelope(args.encfile),
                    require_password(args.password),
                    params_from_args(args),
                    args.encfile,
                    args.out_dir
                )
            case "analyze":
                if args.filename:
                    print_analysis(analyze_filename(args.filename))
                elif args.text is not None:
                    print_analysis(analyze_content(args.text))
                else:
                    raise ValueError(f"{bcolors.FAIL}Provide --text or --filename{bcolors.ENDC}")
            case "strength":
                strength = evaluate_password_strength(args.password)
                print(f"Score {strength.score}/4: {strength.feedback}")
            case _:
                interactive_menu()
    except Exception as e:
        print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e)
        sys.exit(1)

if __name__ == "__main__":
    main()
