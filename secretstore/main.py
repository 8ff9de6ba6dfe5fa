import os
import sys
import logging
import argparse
from getpass import getpass
from secretstore.models import ScryptParams, bcolors
from secretstore.core import (
    create_keystore, import_private_key, read_keystore, unlock_keystore, update_keystore_passphrase
)
from secretstore.utils.menu import (
    menu_generate_keystore, menu_import_private_key, menu_unlock_keystore, menu_change_passphrase,
    menu_inspect_keystore, print_record_summary
)

def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

def add_cost_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--n", type=int, default=ScryptParams.n, help="scrypt CPU/memory cost (power of two)")
    parser.add_argument("--r", type=int, default=ScryptParams.r, help="scrypt block size")
    parser.add_argument("--p", type=int, default=ScryptParams.p, help="scrypt parallelization")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="secretstore - Web3 Secret Storage (V3) keystore tool")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    generate_parser = subparsers.add_parser("generate", help="Generate a new encrypted key")
    generate_parser.add_argument("--dir", default=".", help="Keystore directory")
    generate_parser.add_argument("--passphrase", help="Keystore passphrase")
    add_cost_arguments(generate_parser)

    import_parser = subparsers.add_parser("import", help="Encrypt an existing private key")
    import_parser.add_argument("--private-key", dest="private_key", required=True, help="Private key (hex)")
    import_parser.add_argument("--dir", default=".", help="Keystore directory")
    import_parser.add_argument("--passphrase", help="Keystore passphrase")
    add_cost_arguments(import_parser)

    unlock_parser = subparsers.add_parser("unlock", help="Verify a passphrase and show the address")
    unlock_parser.add_argument("--keystore", required=True, help="Keystore file")
    unlock_parser.add_argument("--passphrase", help="Keystore passphrase")
    unlock_parser.add_argument("--show-private", dest="show_private", action="store_true",
                               help="Print the decrypted private key")

    passwd_parser = subparsers.add_parser("passwd", help="Change a keystore passphrase")
    passwd_parser.add_argument("--keystore", required=True, help="Keystore file")
    passwd_parser.add_argument("--passphrase", help="Current passphrase")
    passwd_parser.add_argument("--new-passphrase", dest="new_passphrase", help="New passphrase")

    inspect_parser = subparsers.add_parser("inspect", help="Show keystore metadata")
    inspect_parser.add_argument("--keystore", required=True, help="Keystore file")
    return parser

def interactive_menu():
    _=os.system("cls") | os.system("clear")
    while True:
        print(f"{bcolors.WARNING}{bcolors.BOLD}secretstore - Web3 Secret Storage keystore{bcolors.ENDC}")
        print(f"{bcolors.GREY}{bcolors.BOLD}(]≡≡≡≡ø‡»{bcolors.OKCYAN}========================================-{bcolors.ENDC}")
        print("")
        print(f"{bcolors.BOLD}1){bcolors.ENDC} Generate new encrypted key")
        print(f"{bcolors.BOLD}2){bcolors.ENDC} Import private key")
        print(f"{bcolors.BOLD}3){bcolors.ENDC} Unlock keystore")
        print(f"{bcolors.BOLD}4){bcolors.ENDC} Change passphrase")
        print(f"{bcolors.BOLD}5){bcolors.ENDC} Inspect keystore")
        print(f"{bcolors.BOLD}0){bcolors.ENDC} Exit")
        print("")
        choice = input(f"{bcolors.BOLD}Choice: {bcolors.ENDC}").strip()
        try:
            match choice:
                case "0":
                    break
                case "1":
                    menu_generate_keystore()
                case "2":
                    menu_import_private_key()
                case "3":
                    menu_unlock_keystore()
                case "4":
                    menu_change_passphrase()
                case "5":
                    menu_inspect_keystore()
                case _:
                    print("Invalid choice")
        except Exception as e:
            print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e)
        _=input(f"{bcolors.OKGREEN}Enter to continue...{bcolors.ENDC}")
        _=os.system("cls") | os.system("clear")

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        match args.command:
            case "generate":
                passphrase = args.passphrase if args.passphrase is not None else getpass("Passphrase: ")
                path, record = create_keystore(passphrase, args.dir, ScryptParams(n=args.n, r=args.r, p=args.p))
                print(f"Address: 0x{record.address.hex()}")
                print(f"Keystore: {path}")
            case "import":
                passphrase = args.passphrase if args.passphrase is not None else getpass("Passphrase: ")
                path, record = import_private_key(args.private_key, passphrase, args.dir,
                                                  ScryptParams(n=args.n, r=args.r, p=args.p))
                print(f"Address: 0x{record.address.hex()}")
                print(f"Keystore: {path}")
            case "unlock":
                passphrase = args.passphrase if args.passphrase is not None else getpass("Passphrase: ")
                keypair = unlock_keystore(passphrase, args.keystore)
                print(f"Address: 0x{keypair.address_hex}")
                if args.show_private:
                    print(f"Private key: {keypair.private_key.hex()}")
            case "passwd":
                passphrase = args.passphrase if args.passphrase is not None else getpass("Current passphrase: ")
                new_passphrase = args.new_passphrase if args.new_passphrase is not None else getpass("New passphrase: ")
                record = update_keystore_passphrase(args.keystore, passphrase, new_passphrase)
                print(f"Passphrase updated for 0x{record.address.hex()}")
            case "inspect":
                print_record_summary(read_keystore(args.keystore))
            case _:
                interactive_menu()
    except Exception as e:
        print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e)
        sys.exit(1)

if __name__ == "__main__":
    main()
