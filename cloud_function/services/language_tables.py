"""
Static language tables shared by the prompt builder, the fallback
generator and the language guard.

All tables are read-only mappings keyed by ISO 639-1 code and are
checked once at import time by `validate_tables()`.
"""
from types import MappingProxyType

SUPPORTED_LANGUAGES = ("en", "es", "fr", "de", "it", "pt")
DEFAULT_LANGUAGE = "en"

LANGUAGE_NAMES = MappingProxyType({
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
})

# Preferred native words passed to the model when the summary language
# differs from the book's language: (use, instead of)
MANDATORY_VOCABULARY = MappingProxyType({
    "es": (
        ("ofrece", "offers"),
        ("explora", "explores"),
        ("presenta", "presents"),
        ("análisis", "analysis"),
        ("perspectivas", "perspectives"),
        ("comprensión", "understanding"),
        ("obra", "work"),
    ),
    "fr": (
        ("offre", "offers"),
        ("explore", "explores"),
        ("présente", "presents"),
        ("analyse", "analysis"),
        ("perspectives", "perspectives"),
        ("compréhension", "understanding"),
        ("œuvre", "work"),
    ),
    "de": (
        ("bietet", "offers"),
        ("erforscht", "explores"),
        ("präsentiert", "presents"),
        ("Analyse", "analysis"),
        ("Perspektiven", "perspectives"),
        ("Verständnis", "understanding"),
        ("Werk", "work"),
    ),
    "it": (
        ("offre", "offers"),
        ("esplora", "explores"),
        ("presenta", "presents"),
        ("analisi", "analysis"),
        ("prospettive", "perspectives"),
        ("comprensione", "understanding"),
        ("opera", "work"),
    ),
    "pt": (
        ("oferece", "offers"),
        ("explora", "explores"),
        ("apresenta", "presents"),
        ("análise", "analysis"),
        ("perspectivas", "perspectives"),
        ("compreensão", "understanding"),
        ("obra", "work"),
    ),
})

CATEGORY_TERMS = (
    "Science", "History", "Technology", "Philosophy", "Psychology",
    "Education", "Business", "Health", "Fiction", "Biography",
    "Anthropology", "Politics", "Economics", "Sociology", "Literature",
    "Art", "Religion", "Strategy", "Military", "War", "Management",
    "Leadership",
)

CATEGORY_TRANSLATIONS = MappingProxyType({
    "en": MappingProxyType({term: term for term in CATEGORY_TERMS}),
    "es": MappingProxyType({
        "Science": "Ciencia", "History": "Historia", "Technology": "Tecnología",
        "Philosophy": "Filosofía", "Psychology": "Psicología", "Education": "Educación",
        "Business": "Negocios", "Health": "Salud", "Fiction": "Ficción",
        "Biography": "Biografía", "Anthropology": "Antropología", "Politics": "Política",
        "Economics": "Economía", "Sociology": "Sociología", "Literature": "Literatura",
        "Art": "Arte", "Religion": "Religión", "Strategy": "Estrategia",
        "Military": "Militar", "War": "Guerra", "Management": "Gestión",
        "Leadership": "Liderazgo",
    }),
    "fr": MappingProxyType({
        "Science": "Science", "History": "Histoire", "Technology": "Technologie",
        "Philosophy": "Philosophie", "Psychology": "Psychologie", "Education": "Éducation",
        "Business": "Affaires", "Health": "Santé", "Fiction": "Fiction",
        "Biography": "Biographie", "Anthropology": "Anthropologie", "Politics": "Politique",
        "Economics": "Économie", "Sociology": "Sociologie", "Literature": "Littérature",
        "Art": "Art", "Religion": "Religion", "Strategy": "Stratégie",
        "Military": "Militaire", "War": "Guerre", "Management": "Gestion",
        "Leadership": "Leadership",
    }),
    "de": MappingProxyType({
        "Science": "Wissenschaft", "History": "Geschichte", "Technology": "Technologie",
        "Philosophy": "Philosophie", "Psychology": "Psychologie", "Education": "Bildung",
        "Business": "Wirtschaft", "Health": "Gesundheit", "Fiction": "Belletristik",
        "Biography": "Biographie", "Anthropology": "Anthropologie", "Politics": "Politik",
        "Economics": "Ökonomie", "Sociology": "Soziologie", "Literature": "Literatur",
        "Art": "Kunst", "Religion": "Religion", "Strategy": "Strategie",
        "Military": "Militär", "War": "Krieg", "Management": "Management",
        "Leadership": "Führung",
    }),
    "it": MappingProxyType({
        "Science": "Scienza", "History": "Storia", "Technology": "Tecnologia",
        "Philosophy": "Filosofia", "Psychology": "Psicologia", "Education": "Educazione",
        "Business": "Affari", "Health": "Salute", "Fiction": "Narrativa",
        "Biography": "Biografia", "Anthropology": "Antropologia", "Politics": "Politica",
        "Economics": "Economia", "Sociology": "Sociologia", "Literature": "Letteratura",
        "Art": "Arte", "Religion": "Religione", "Strategy": "Strategia",
        "Military": "Militare", "War": "Guerra", "Management": "Gestione",
        "Leadership": "Leadership",
    }),
    "pt": MappingProxyType({
        "Science": "Ciência", "History": "História", "Technology": "Tecnologia",
        "Philosophy": "Filosofia", "Psychology": "Psicologia", "Education": "Educação",
        "Business": "Negócios", "Health": "Saúde", "Fiction": "Ficção",
        "Biography": "Biografia", "Anthropology": "Antropologia", "Politics": "Política",
        "Economics": "Economia", "Sociology": "Sociologia", "Literature": "Literatura",
        "Art": "Arte", "Religion": "Religião", "Strategy": "Estratégia",
        "Military": "Militar", "War": "Guerra", "Management": "Gestão",
        "Leadership": "Liderança",
    }),
})

# Language guard rules. Phrase patterns are raw regular expressions applied
# first; word patterns are literal words wrapped in \b...\b.
GUARD_PHRASE_RULES = MappingProxyType({
    "es": (
        (r"\bin this book\b", "en este libro"),
        (r"\bthis book\b", "este libro"),
        (r"\bthis work\b", "esta obra"),
        (r"\bthe author\b", "el autor"),
        (r"\bthe authors\b", "los autores"),
        (r"\bprovides insights into\b", "ofrece perspectivas sobre"),
        (r"\boffers insights into\b", "ofrece perspectivas sobre"),
        (r"\bkey concepts\b", "conceptos clave"),
    ),
    "de": (
        (r"\bin this book\b", "in diesem Buch"),
        (r"\bthis book\b", "dieses Buch"),
        (r"\bthis work\b", "dieses Werk"),
        (r"\bthe author\b", "der Autor"),
        (r"\bthe authors\b", "die Autoren"),
        (r"\bprovides insights into\b", "bietet Einblicke in"),
        (r"\boffers insights into\b", "bietet Einblicke in"),
        (r"\bkey concepts\b", "Schlüsselkonzepte"),
    ),
    "it": (
        (r"\bin this book\b", "in questo libro"),
        (r"\bthis book\b", "questo libro"),
        (r"\bthis work\b", "quest'opera"),
        (r"\bthe author\b", "l'autore"),
        (r"\bthe authors\b", "gli autori"),
        (r"\bprovides insights into\b", "offre prospettive su"),
        (r"\boffers insights into\b", "offre prospettive su"),
        (r"\bkey concepts\b", "concetti chiave"),
    ),
    "pt": (
        (r"\bin this book\b", "neste livro"),
        (r"\bthis book\b", "este livro"),
        (r"\bthis work\b", "esta obra"),
        (r"\bthe author\b", "o autor"),
        (r"\bthe authors\b", "os autores"),
        (r"\bprovides insights into\b", "oferece perspectivas sobre"),
        (r"\boffers insights into\b", "oferece perspectivas sobre"),
        (r"\bkey concepts\b", "conceitos-chave"),
    ),
})

GUARD_WORD_RULES = MappingProxyType({
    "es": (
        ("anthropology", "antropología"), ("science", "ciencia"), ("history", "historia"),
        ("technology", "tecnología"), ("psychology", "psicología"), ("philosophy", "filosofía"),
        ("economics", "economía"), ("politics", "política"), ("sociology", "sociología"),
        ("literature", "literatura"), ("education", "educación"), ("business", "negocios"),
        ("health", "salud"), ("biography", "biografía"), ("fiction", "ficción"),
        ("art", "arte"), ("religion", "religión"),
        ("offers", "ofrece"), ("explores", "explora"), ("presents", "presenta"),
        ("analysis", "análisis"), ("perspectives", "perspectivas"),
        ("understanding", "comprensión"), ("delivers", "ofrece"),
    ),
    "de": (
        ("science", "Wissenschaft"), ("history", "Geschichte"), ("technology", "Technologie"),
        ("psychology", "Psychologie"), ("philosophy", "Philosophie"), ("economics", "Ökonomie"),
        ("politics", "Politik"), ("sociology", "Soziologie"), ("literature", "Literatur"),
        ("education", "Bildung"), ("business", "Wirtschaft"), ("health", "Gesundheit"),
        ("biography", "Biographie"), ("fiction", "Belletristik"),
        ("anthropology", "Anthropologie"),
        ("work", "Werk"), ("offers", "bietet"), ("explores", "erforscht"),
        ("presents", "präsentiert"), ("analysis", "Analyse"),
        ("perspectives", "Perspektiven"), ("understanding", "Verständnis"),
    ),
    "pt": (
        ("science", "ciência"), ("history", "história"), ("technology", "tecnologia"),
        ("psychology", "psicologia"), ("philosophy", "filosofia"), ("economics", "economia"),
        ("politics", "política"), ("sociology", "sociologia"), ("literature", "literatura"),
        ("education", "educação"), ("business", "negócios"), ("health", "saúde"),
        ("biography", "biografia"), ("fiction", "ficção"), ("anthropology", "antropologia"),
        ("art", "arte"), ("religion", "religião"),
        ("work", "obra"), ("offers", "oferece"), ("explores", "explora"),
        ("presents", "apresenta"), ("analysis", "análise"),
        ("perspectives", "perspectivas"), ("understanding", "compreensão"),
    ),
    "it": (
        ("science", "scienza"), ("history", "storia"), ("technology", "tecnologia"),
        ("psychology", "psicologia"), ("philosophy", "filosofia"), ("economics", "economia"),
        ("politics", "politica"), ("sociology", "sociologia"), ("literature", "letteratura"),
        ("education", "educazione"), ("business", "affari"), ("health", "salute"),
        ("biography", "biografia"), ("fiction", "narrativa"), ("anthropology", "antropologia"),
        ("art", "arte"), ("religion", "religione"),
        ("work", "opera"), ("offers", "offre"), ("explores", "esplora"),
        ("presents", "presenta"), ("analysis", "analisi"),
        ("perspectives", "prospettive"), ("understanding", "comprensione"),
    ),
})


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, LANGUAGE_NAMES[DEFAULT_LANGUAGE])


def validate_tables():
    """Fails fast on a table that is missing a supported language or term."""
    for code in SUPPORTED_LANGUAGES:
        if code not in LANGUAGE_NAMES:
            raise ValueError(f"Missing language name for '{code}'")
        table = CATEGORY_TRANSLATIONS.get(code)
        if table is None:
            raise ValueError(f"Missing category translations for '{code}'")
        missing = [term for term in CATEGORY_TERMS if term not in table]
        if missing:
            raise ValueError(f"Category translations for '{code}' lack {missing}")

    for code, rules in list(GUARD_PHRASE_RULES.items()) + list(GUARD_WORD_RULES.items()):
        if code not in SUPPORTED_LANGUAGES or code == DEFAULT_LANGUAGE:
            raise ValueError(f"Guard rules defined for unsupported language '{code}'")
        for pattern, replacement in rules:
            if not pattern or not replacement:
                raise ValueError(f"Empty guard rule for '{code}'")

    for code in MANDATORY_VOCABULARY:
        if code not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Vocabulary hints defined for unsupported language '{code}'")


validate_tables()
