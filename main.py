"""
Developer entry point: normalizes → classifies → extracts → builds the catalog query.

Runs offline (no catalog, no LLM) so the keyword tables can be checked by eye:
    python main.py
    python main.py "je cherche un canapé d'angle gris"
"""

import json
import sys
from text_utils import normalize
from classifier import classify, score_intents
from attribute_extractor import extract_attributes, detect_sector
from query_builder import build_catalog_query, to_params


def process(utterance: str):
    """Classify a single utterance and print results."""
    intent = classify(utterance)
    scores = score_intents(utterance)
    filters = extract_attributes(utterance)

    print(f"\n{'━'*70}")
    print(f"💬  \"{utterance}\"")
    print(f"🔤  Normalized: {normalize(utterance)}")
    print(f"🎯  Intent:     {intent.value}")
    print(f"📊  Scores:     {', '.join(f'{i.value}={s}' for i, s in scores.items())}")
    print(f"🏷️   Sector:     {detect_sector(utterance)}")
    print(f"📦  Filters:    {json.dumps(filters.to_dict(), ensure_ascii=False)}")

    if filters.is_search:
        query = build_catalog_query(filters)
        print("\n   🔗 Catalog query:")
        for key, value in to_params(query):
            print(f"      {key} = {value}")
        print(f"      → {query.description}")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        process(" ".join(sys.argv[1:]))
        sys.exit(0)

    tests = [
        # ── Small talk ──
        "Bonjour",
        "Salut, ça va ?",
        "Merci beaucoup !",

        # ── Product search ──
        "Je cherche une table basse scandinave en bois",
        "Montre-moi des chaises en velours bleu",
        "Un canapé d'angle gris pour le salon",
        "Tu as des lits 160x200 à moins de 800€ ?",
        "Une table ronde en marbre entre 300 et 600 euros",
        "Je voudrais un fauteuil en promo",
        "table",

        # ── Advice / qualification ──
        "Quelle est la qualité de vos matériaux ?",
        "Vous avez un conseil pour décorer mon salon ?",

        # ── Other sectors ──
        "Vous vendez des montres ?",
        "Je cherche une robe",
    ]

    for t in tests:
        process(t)
