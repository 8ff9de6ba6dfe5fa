import os
from getpass import getpass
from secretstore.models import ScryptParams, bcolors
from secretstore.core import (
    create_keystore, import_private_key, read_keystore, unlock_keystore, update_keystore_passphrase
)

# -----------------------------
# Interactive Configuration Helpers
# -----------------------------
def options() -> ScryptParams:
    """
    Interactive scrypt cost configuration.

    Prompts for each cost factor with the strong defaults:
    - N: CPU/memory cost, power of two (memory = 128 * r * N bytes)
    - r: block size factor
    - p: parallelization factor

    Returns:
        ScryptParams built from the answers
    """
    n = int(input(f"scrypt N (default {ScryptParams.n}): ").strip() or ScryptParams.n)
    r = int(input(f"scrypt r (default {ScryptParams.r}): ").strip() or ScryptParams.r)
    p = int(input(f"scrypt p (default {ScryptParams.p}): ").strip() or ScryptParams.p)
    return ScryptParams(n=n, r=r, p=p)

def ask_new_passphrase() -> str:
    passphrase = getpass("New passphrase: ")
    if getpass("Repeat passphrase: ") != passphrase:
        raise ValueError("Passphrases do not match")
    return passphrase

# -----------------------------
# Menu Actions
# -----------------------------
def menu_generate_keystore():
    """
    Interactive menu for generating a new encrypted key.

    The private key never touches disk in the clear: it is generated in
    memory and only the scrypt/AES-128-CTR encrypted record is written.
    """
    directory = input("Keystore directory (default .): ").strip() or "."
    params = options()
    passphrase = ask_new_passphrase()
    path, record = create_keystore(passphrase, directory, params)
    print(f"{bcolors.OKGREEN}Address:{bcolors.ENDC} 0x{record.address.hex()}")
    print(f"Keystore written to {path}")

def menu_import_private_key():
    """Interactive menu for encrypting an existing hex private key."""
    private_key = getpass("Private key (hex): ").strip()
    directory = input("Keystore directory (default .): ").strip() or "."
    params = options()
    passphrase = ask_new_passphrase()
    path, record = import_private_key(private_key, passphrase, directory, params)
    print(f"{bcolors.OKGREEN}Address:{bcolors.ENDC} 0x{record.address.hex()}")
    print(f"Keystore written to {path}")

def menu_unlock_keystore():
    """
    Interactive menu for verifying a passphrase against a keystore.

    Shows the private key only on explicit request.
    """
    keystore_file = input("Keystore file: ").strip()
    if not os.path.exists(keystore_file):
        print("Keystore file not found.")
        return
    passphrase = getpass("Passphrase: ")
    keypair = unlock_keystore(passphrase, keystore_file)
    print(f"{bcolors.OKGREEN}Unlocked{bcolors.ENDC} 0x{keypair.address_hex}")
    if (input("Show private key? (y/n) [n]: ").strip().lower() or "n") == "y":
        print(f"{bcolors.WARNING}{keypair.private_key.hex()}{bcolors.ENDC}")

def menu_change_passphrase():
    keystore_file = input("Keystore file: ").strip()
    if not os.path.exists(keystore_file):
        print("Keystore file not found.")
        return
    old_passphrase = getpass("Current passphrase: ")
    new_passphrase = ask_new_passphrase()
    update_keystore_passphrase(keystore_file, old_passphrase, new_passphrase)
    print(f"{bcolors.OKGREEN}Passphrase updated{bcolors.ENDC}")

def menu_inspect_keystore():
    keystore_file = input("Keystore file: ").strip()
    if not os.path.exists(keystore_file):
        print("Keystore file not found.")
        return
    print_record_summary(read_keystore(keystore_file))

def print_record_summary(record):
    kp = record.crypto.kdfparams
    address = f"0x{record.address.hex()}" if record.address is not None else "(not stored)"
    print(f"{bcolors.BOLD}Address:{bcolors.ENDC} {address}")
    print(f"{bcolors.BOLD}Version:{bcolors.ENDC} {record.version}")
    print(f"{bcolors.BOLD}Cipher:{bcolors.ENDC}  {record.crypto.cipher}")
    print(f"{bcolors.BOLD}KDF:{bcolors.ENDC}     {record.crypto.kdf} (n={kp.n}, r={kp.r}, p={kp.p}, dklen={kp.dklen})")
