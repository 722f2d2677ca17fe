"""
Fallback Generator - Deterministic summaries built from metadata only.

Used when the AI service stays rate-limited through every retry. No
network calls, no randomness: the same request always yields the same
text.
"""
from typing import Dict, List, Optional, Tuple

from models.summary import SummaryDraft, SummaryRequest, PROCESSING_FALLBACK
from services.errors import FallbackUnavailableError
from services.language_guard import LanguageGuard
from services.language_tables import CATEGORY_TRANSLATIONS, DEFAULT_LANGUAGE
from services.truncation import SHORT_SUMMARY_LIMIT, DETAILED_SUMMARY_LIMIT, truncate

FALLBACK_BASELINE_CONFIDENCE = 50
DESCRIPTION_EXCERPT_CHARS = 400

# Per-language wording. `{...}` fields are filled from _template_context().
TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        "short": '"{title}" by {authors} is a {first_category} work published in {published_date}. '
                 '{page_phrase} offers insights into {category_list}.',
        "short_fallback": '"{title}" is an important work that explores fundamental themes in its field of study.',
        "pages": "This {page_count}-page book",
        "no_pages": "This book",
        "first_category_default": "important",
        "detailed": '"{title}" by {authors} ({publisher}, {published_date}) is a {page_count}-page work in '
                    '{categories}. {body} The book offers a comprehensive perspective on fundamental concepts '
                    'and provides readers with valuable tools for better understanding the subject. The authors '
                    'present detailed analysis and practical methodologies that are essential for deepening '
                    'knowledge in this field of study.',
        "detailed_fallback": '"{title}" is a fundamental work that addresses essential aspects of {field}. '
                             'Through detailed analysis, the authors present key concepts and important '
                             'methodologies. This publication offers valuable perspectives for readers interested '
                             'in deepening their understanding of the subject, providing practical tools and '
                             'innovative approaches that contribute significantly to the development of knowledge '
                             'in this area of study.',
        "generic_body": "This work explores important themes in its field.",
        "field_default": "its field",
    },
    "es": {
        "short": '"{title}" por {authors} es una obra de {first_category} publicada en {published_date}. '
                 '{page_phrase} ofrece perspectivas sobre {category_list}.',
        "short_fallback": '"{title}" es una obra importante que explora temas fundamentales en su campo de estudio.',
        "pages": "Esta obra de {page_count} páginas",
        "no_pages": "Este libro",
        "first_category_default": "importancia",
        "detailed": '"{title}" de {authors} ({publisher}, {published_date}) es una obra de {page_count} páginas '
                    'en {categories}. {body} El libro ofrece una perspectiva integral sobre los conceptos '
                    'fundamentales y proporciona a los lectores herramientas valiosas para comprender mejor el '
                    'tema. Los autores presentan análisis detallados y metodologías prácticas que resultan '
                    'esenciales para profundizar en este campo de estudio.',
        "detailed_fallback": '"{title}" es una obra fundamental que aborda aspectos esenciales de {field}. '
                             'A través de un análisis detallado, los autores presentan conceptos clave y '
                             'metodologías importantes. Esta publicación ofrece perspectivas valiosas para lectores '
                             'interesados en profundizar su comprensión del tema, proporcionando herramientas '
                             'prácticas y enfoques innovadores que contribuyen significativamente al desarrollo del '
                             'conocimiento en esta área de estudio.',
        "generic_body": "Esta obra explora temas importantes en su campo.",
        "field_default": "su campo",
    },
    "fr": {
        "short": '"{title}" par {authors} est une œuvre de {first_category} publiée en {published_date}. '
                 '{page_phrase} offre des perspectives sur {category_list}.',
        "short_fallback": '"{title}" est une œuvre importante qui explore des thèmes fondamentaux dans son '
                          "domaine d'étude.",
        "pages": "Ce livre de {page_count} pages",
        "no_pages": "Ce livre",
        "first_category_default": "importance",
        "detailed": '"{title}" par {authors} ({publisher}, {published_date}) est une œuvre de {page_count} pages '
                    'en {categories}. {body} Le livre offre une perspective complète sur les concepts '
                    'fondamentaux et fournit aux lecteurs des outils précieux pour mieux comprendre le sujet. '
                    'Les auteurs présentent une analyse détaillée et des méthodologies pratiques essentielles '
                    "pour approfondir les connaissances dans ce domaine d'étude.",
        "detailed_fallback": '"{title}" est une œuvre fondamentale qui aborde les aspects essentiels de {field}. '
                             'À travers une analyse détaillée, les auteurs présentent des concepts clés et des '
                             'méthodologies importantes. Cette publication offre des perspectives précieuses pour '
                             'les lecteurs intéressés à approfondir leur compréhension du sujet, fournissant des '
                             'outils pratiques et des approches innovantes qui contribuent significativement au '
                             "développement des connaissances dans ce domaine d'étude.",
        "generic_body": "Cette œuvre explore des thèmes importants dans son domaine.",
        "field_default": "son domaine",
    },
    "de": {
        "short": '"{title}" von {authors} ist ein Werk im Bereich {first_category}, veröffentlicht '
                 '{published_date}. {page_phrase} bietet Einblicke in {category_list}.',
        "short_fallback": '"{title}" ist ein wichtiges Werk, das grundlegende Themen in seinem Studienbereich '
                          'erforscht.',
        "pages": "Dieses {page_count}-seitige Buch",
        "no_pages": "Dieses Buch",
        "first_category_default": "Wissen",
        "detailed": '"{title}" von {authors} ({publisher}, {published_date}) ist ein {page_count}-seitiges Werk '
                    'im Bereich {categories}. {body} Das Buch bietet eine umfassende Perspektive auf '
                    'grundlegende Konzepte und stellt den Lesern wertvolle Werkzeuge für ein besseres '
                    'Verständnis des Themas zur Verfügung. Die Autoren präsentieren detaillierte Analysen und '
                    'praktische Methodologien, die für die Vertiefung des Wissens in diesem Studienbereich '
                    'wesentlich sind.',
        "detailed_fallback": '"{title}" ist ein grundlegendes Werk, das wesentliche Aspekte von {field} '
                             'behandelt. Durch detaillierte Analyse präsentieren die Autoren Schlüsselkonzepte und '
                             'wichtige Methodologien. Diese Veröffentlichung bietet wertvolle Perspektiven für '
                             'Leser, die ihr Verständnis des Themas vertiefen möchten, und stellt praktische '
                             'Werkzeuge und innovative Ansätze bereit, die erheblich zur Entwicklung des Wissens in '
                             'diesem Studienbereich beitragen.',
        "generic_body": "Dieses Werk erforscht wichtige Themen in seinem Fachgebiet.",
        "field_default": "seinem Fachgebiet",
    },
    "it": {
        "short": "\"{title}\" di {authors} è un'opera di {first_category} pubblicata nel {published_date}. "
                 '{page_phrase} offre prospettive su {category_list}.',
        "short_fallback": "\"{title}\" è un'opera importante che esplora temi fondamentali nel suo campo di studio.",
        "pages": "Questo libro di {page_count} pagine",
        "no_pages": "Questo libro",
        "first_category_default": "rilievo",
        "detailed": "\"{title}\" di {authors} ({publisher}, {published_date}) è un'opera di {page_count} pagine "
                    'nel campo di {categories}. {body} Il libro offre una prospettiva completa sui concetti '
                    'fondamentali e fornisce ai lettori strumenti preziosi per comprendere meglio '
                    "l'argomento. Gli autori presentano analisi dettagliate e metodologie pratiche essenziali "
                    'per approfondire la conoscenza in questo campo di studio.',
        "detailed_fallback": "\"{title}\" è un'opera fondamentale che affronta aspetti essenziali di {field}. "
                             "Attraverso un'analisi dettagliata, gli autori presentano concetti chiave e "
                             'metodologie importanti. Questa pubblicazione offre prospettive preziose per i '
                             'lettori interessati ad approfondire la loro comprensione dell\'argomento, fornendo '
                             'strumenti pratici e approcci innovativi che contribuiscono significativamente allo '
                             "sviluppo della conoscenza in quest'area di studio.",
        "generic_body": "Quest'opera esplora temi importanti nel suo campo.",
        "field_default": "questo campo",
    },
    "pt": {
        "short": '"{title}" por {authors} é uma obra de {first_category} publicada em {published_date}. '
                 '{page_phrase} oferece perspectivas sobre {category_list}.',
        "short_fallback": '"{title}" é uma obra importante que explora temas fundamentais em seu campo de estudo.',
        "pages": "Este livro de {page_count} páginas",
        "no_pages": "Este livro",
        "first_category_default": "importância",
        "detailed": '"{title}" por {authors} ({publisher}, {published_date}) é uma obra de {page_count} páginas '
                    'em {categories}. {body} O livro oferece uma perspectiva abrangente sobre conceitos '
                    'fundamentais e fornece aos leitores ferramentas valiosas para melhor compreender o '
                    'assunto. Os autores apresentam análises detalhadas e metodologias práticas essenciais '
                    'para aprofundar o conhecimento neste campo de estudo.',
        "detailed_fallback": '"{title}" é uma obra fundamental que aborda aspectos essenciais de {field}. '
                             'Através de análise detalhada, os autores apresentam conceitos-chave e metodologias '
                             'importantes. Esta publicação oferece perspectivas valiosas para leitores interessados '
                             'em aprofundar sua compreensão do assunto, fornecendo ferramentas práticas e '
                             'abordagens inovadoras que contribuem significativamente para o desenvolvimento do '
                             'conhecimento nesta área de estudo.',
        "generic_body": "Esta obra explora temas importantes em seu campo.",
        "field_default": "seu campo",
    },
}

REASONING_TRANSLATED = ("Fallback summary with translation", "Limited by API rate limits")
REASONING_SAME_LANGUAGE = ("Fallback summary due to API rate limits",)
FALLBACK_SOURCES = ("Book metadata", "Description")


def translate_category(category: str, target_language: str) -> str:
    """
    Looks a category up in the target language table.

    Unknown categories come back lowercased and untranslated.
    """
    table = CATEGORY_TRANSLATIONS.get(target_language)
    if table is None:
        return category.lower()
    if category in table:
        return table[category]
    for term, translated in table.items():
        if term.lower() == category.lower():
            return translated
    return category.lower()


class FallbackGenerator:
    """Builds short and detailed summaries from fixed language templates."""

    def __init__(self, guard: Optional[LanguageGuard] = None):
        self.guard = guard or LanguageGuard()

    def _templates(self, target_language: str) -> Dict[str, str]:
        return TEMPLATES.get(target_language, TEMPLATES[DEFAULT_LANGUAGE])

    def _template_context(self, request: SummaryRequest, templates: Dict[str, str]) -> Dict[str, object]:
        categories: List[str] = [translate_category(c, request.target_language) for c in request.categories]
        first_category = categories[0] if categories else templates["first_category_default"]

        if request.translation_applied or not request.description:
            body = templates["generic_body"]
        else:
            body = request.description[:DESCRIPTION_EXCERPT_CHARS]

        if request.page_count > 0:
            page_phrase = templates["pages"].format(page_count=request.page_count)
        else:
            page_phrase = templates["no_pages"]

        return {
            "title": request.title,
            "authors": ", ".join(request.authors),
            "publisher": request.publisher,
            "published_date": request.published_date,
            "page_count": request.page_count,
            "first_category": first_category,
            "category_list": ", ".join(categories).lower() or first_category,
            "categories": ", ".join(categories) or templates["field_default"],
            "field": first_category if categories else templates["field_default"],
            "page_phrase": page_phrase,
            "body": body,
        }

    def _render(self, template: str, fallback: str, context: Dict[str, object],
                limit: int, target_language: str, names=()) -> str:
        text = template.format(**context)
        if len(text) > limit:
            text = fallback.format(**context)
        text = self.guard.clean(text, target_language, preserve=names)
        return truncate(text, limit)

    def generate(self, request: SummaryRequest) -> Tuple[str, str]:
        """Returns (short_summary, detailed_summary) for the request."""
        if not request.title or not request.title.strip():
            raise FallbackUnavailableError("Cannot build a fallback summary without a title.")

        templates = self._templates(request.target_language)
        context = self._template_context(request, templates)

        short = self._render(templates["short"], templates["short_fallback"], context,
                             SHORT_SUMMARY_LIMIT, request.target_language, request.proper_names)
        detailed = self._render(templates["detailed"], templates["detailed_fallback"], context,
                                DETAILED_SUMMARY_LIMIT, request.target_language, request.proper_names)

        if not short or not detailed:
            raise FallbackUnavailableError("Fallback templates produced no text.")
        return short, detailed

    def generate_draft(self, request: SummaryRequest) -> SummaryDraft:
        short, detailed = self.generate(request)
        reasoning = REASONING_TRANSLATED if request.translation_applied else REASONING_SAME_LANGUAGE
        return SummaryDraft(
            short_summary=short,
            detailed_summary=detailed,
            reasoning_factors=reasoning,
            sources_used=FALLBACK_SOURCES,
            provisional_confidence=FALLBACK_BASELINE_CONFIDENCE,
            processing_method=PROCESSING_FALLBACK,
        )
