"""
Correspondance UID de carte → matricule étudiant.

Les cartes de démonstration (préfixe NFC) sont traduites vers des matricules
connus. Tout autre UID est utilisé tel quel comme matricule candidat.
"""

DEMO_CARD_PREFIX = "NFC"

DEMO_CARD_MAPPING = {
    "NFC001234567890": "STU001",
    "NFC001234567891": "STU002",
    "NFC001234567892": "STU003",
    "NFC001234567893": "STU004",
    "NFC001234567894": "STU005",
    "NFC001234567895": "STU006",
    "NFC001234567896": "STU007",
    "NFC001234567897": "STU008",
}


def resolve_external_student_id(card_uid: str, use_demo_mapping: bool = True) -> str:
    """Retourne le matricule à rechercher pour l'UID scanné."""
    if use_demo_mapping and card_uid.startswith(DEMO_CARD_PREFIX):
        return DEMO_CARD_MAPPING.get(card_uid, card_uid)
    return card_uid
