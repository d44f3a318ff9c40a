from __future__ import annotations

import re

CATEGORY_LIST = [
    "Makanan & Minuman",
    "Transport",
    "Belanja Kebutuhan",
    "Lifestyle",
    "Kesehatan",
    "Tagihan & Utang",
    "Lainnya",
]

DEFAULT_CATEGORY = "Lainnya"

# Iterated in CATEGORY_LIST order; the first category with a hit wins.
CATEGORY_KEYWORDS = {
    "Makanan & Minuman": [
        "makan",
        "minum",
        "jajan",
        "lunch",
        "dinner",
        "sarapan",
        "kopi",
        "cafe",
        "roti",
        "snack",
        "bakso",
        "mie",
        "soto",
        "nasi",
        "ayam",
        "ikan",
        "sate",
        "martabak",
        "gorengan",
    ],
    "Transport": [
        "bensin",
        "parkir",
        "tol",
        "gojek",
        "grab",
        "ojol",
        "uber",
        "taxi",
        "bus",
        "kereta",
        "mrt",
        "krl",
        "angkot",
        "service",
        "bengkel",
        "motor",
        "mobil",
    ],
    "Belanja Kebutuhan": [
        "belanja",
        "supermarket",
        "indomaret",
        "alfamart",
        "market",
        "sayur",
        "buah",
        "sabun",
        "shampoo",
        "odol",
        "tisu",
        "popok",
        "susu",
        "beras",
        "minyak",
    ],
    "Lifestyle": [
        "nonton",
        "bioskop",
        "film",
        "game",
        "buku",
        "hobi",
        "baju",
        "kaos",
        "celana",
        "sepatu",
        "tas",
        "skincare",
        "makeup",
        "salon",
        "barber",
        "netflix",
        "spotify",
    ],
    "Kesehatan": [
        "dokter",
        "obat",
        "apotek",
        "rumah sakit",
        "klinik",
        "vitamin",
        "checkup",
        "gigi",
        "mata",
        "bpjs",
    ],
    "Tagihan & Utang": [
        "listrik",
        "air",
        "pam",
        "internet",
        "wifi",
        "pulsa",
        "paket data",
        "hp",
        "cicilan",
        "utang",
        "arisan",
        "spp",
        "sekolah",
        "kost",
        "kontrakan",
        "sewa",
    ],
    "Lainnya": [
        "sedekah",
        "donasi",
        "kado",
        "hadiah",
        "lain",
        "misc",
    ],
}

_AMOUNT_SUFFIX_MULTIPLIERS = {
    "k": 1000,
    "rb": 1000,
    "ribu": 1000,
    "jt": 1_000_000,
    "juta": 1_000_000,
}

# A unit only counts when no letter follows it ("2 kopi" is not "2k"), and a
# number glued to "#" or to another digit is a tag, never an amount.
AMOUNT_PATTERN = re.compile(
    r"(?<![#\d])(\d+(?:[.,]\d+)?)(?:\s*(ribu|rb|k|juta|jt)(?![a-z]))?",
    re.IGNORECASE,
)

_MIN_BARE_AMOUNT = 100

_CATEGORY_TAG_PATTERN = re.compile(r"#(\d+)")
_FILLER_WORDS_PATTERN = re.compile(
    r"\b(catat|tambah|beli|bayar|untuk|buat|seharga|rp|idr)\b",
    re.IGNORECASE,
)

DEFAULT_ITEM_LABEL = "Transaksi"


def extract_amount(text: str | None) -> float | None:
    """Return the first plausible amount in ``text``.

    A number carrying a unit (``25k``, ``1.5jt``) wins immediately. A bare
    number is only taken when it is at least 100, so quantities such as
    "beli 2 roti" are skipped and the scan moves on.
    """
    if not text:
        return None

    for match in AMOUNT_PATTERN.finditer(text):
        number_part, suffix = match.groups()
        try:
            value = float(number_part.replace(",", "."))
        except ValueError:
            continue
        if suffix:
            # "0k" is not an amount; keep scanning.
            if value <= 0:
                continue
            return value * _AMOUNT_SUFFIX_MULTIPLIERS[suffix.lower()]
        if value >= _MIN_BARE_AMOUNT:
            return value
    return None


def extract_category_tag(text: str | None) -> int | None:
    if not text:
        return None
    match = _CATEGORY_TAG_PATTERN.search(text)
    if not match:
        return None
    return int(match.group(1))


def category_for_tag(tag: int | None) -> str | None:
    """Map a 1-based ``#N`` tag to its category, or None when out of range."""
    if tag is None or not 1 <= tag <= len(CATEGORY_LIST):
        return None
    return CATEGORY_LIST[tag - 1]


def detect_category(text: str | None) -> str:
    lowered = (text or "").lower()
    for category in CATEGORY_LIST:
        keywords = CATEGORY_KEYWORDS.get(category, [])
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def classify_category(text: str | None, explicit_tag: int | None = None) -> str:
    tagged = category_for_tag(explicit_tag)
    if tagged:
        return tagged
    return detect_category(text)


def derive_item_label(text: str) -> str:
    label = _CATEGORY_TAG_PATTERN.sub("", text)
    label = AMOUNT_PATTERN.sub("", label)
    label = _FILLER_WORDS_PATTERN.sub("", label)
    label = label.replace("#", "")
    label = re.sub(r"\s+", " ", label).strip()
    label = re.sub(r"\s+([,.!?])", r"\1", label).strip(" ,.;:-")
    if not label:
        return DEFAULT_ITEM_LABEL
    return label[0].upper() + label[1:]
