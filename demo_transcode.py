#!/usr/bin/env python3
"""
Transcoding Demo: vCard 2.1 → Cards → Contacts → vCard 4.0

Shows the full workflow:
1. Parse a vCard 2.1 address book with a CHARSET parameter
2. Import the cards as flat contacts
3. Export the contacts as vCard 4.0 and 3.0
4. Dump the parsed cards as YAML
"""

import logging

from cardcodec import CodecSettings, Session, Transcoder, Version, convert
from cardcodec.serialization import cards_to_yaml


SAMPLE_V21 = (
    b"BEGIN:VCARD\r\n"
    b"VERSION:2.1\r\n"
    b"N:M\xfcller;Zo\xeb;;;\r\n"
    b"FN;CHARSET=ISO-8859-1:Zo\xeb M\xfcller\r\n"
    b"TEL;CELL;PREF:+61 400 000 000\r\n"
    b"TEL;WORK:+61 2 9999 0000\r\n"
    b"EMAIL;INTERNET;HOME:zoe@example.com\r\n"
    b"NOTE;ENCODING=QUOTED-PRINTABLE:Call after 5pm=3B not on weekends\r\n"
    b"END:VCARD\r\n"
)


def main():
    logging.basicConfig(level=logging.DEBUG, format="   %(name)s: %(message)s")
    settings = CodecSettings(v21_charset="ISO-8859-1")

    print("=" * 80)
    print("TRANSCODING DEMO: vCard 2.1 → Contacts → vCard 4.0")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse vCard 2.1
    # =========================================================================
    print("\n1. PARSING vCard 2.1...")
    reader = Transcoder(Session("flat", "en_AU", Version.V21), settings=settings)
    cards = reader.parse(SAMPLE_V21)
    print(f"   ✓ Cards: {len(cards)}")
    for prop, value in cards[0].pairs():
        print(f"      {prop} = {value}")

    # =========================================================================
    # STEP 2: Import as flat contacts
    # =========================================================================
    print("\n2. IMPORTING CONTACTS...")
    contacts = reader.import_text(SAMPLE_V21)
    for contact in contacts:
        print(f"   ✓ {contact.heading}")
        for name, value in contact.fields:
            print(f"      {name}: {value}")

    # =========================================================================
    # STEP 3: Export as vCard 4.0 and 3.0
    # =========================================================================
    print("\n3. EXPORTING vCard 4.0...")
    writer = Transcoder(Session("flat", "en_AU", Version.V40), settings=settings)
    for line in writer.export_contacts(contacts).decode("utf-8").splitlines():
        print(f"   {line}")

    print("\n   Direct conversion to vCard 3.0:")
    for line in convert(SAMPLE_V21, "2.1", "3.0", settings).decode("utf-8").splitlines():
        print(f"   {line}")

    # =========================================================================
    # STEP 4: YAML dump
    # =========================================================================
    print("\n4. YAML DUMP OF PARSED CARDS:")
    print("-" * 80)
    for line in cards_to_yaml(cards).splitlines():
        print(f"   {line}")

    print("\n" + "=" * 80)
    print("✓ DEMO COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
