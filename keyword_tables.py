"""
Registry of the keyword tables used to understand shopping queries.

Every map is keyword -> canonical value and is scanned in insertion order,
so more specific phrases must come before the shorter ones they contain
("table basse" before "table"). Keywords are matched against normalized text
(lowercase, no accents), as whole words, with an optional plural s/x.
"""

from text_utils import normalize

# ─── PRODUCT TYPES (primary search anchor) ───
PRODUCT_TYPE_MAP = {
    "table basse":        "table basse",
    "table de salon":     "table basse",
    "table de chevet":    "table de chevet",
    "chevet":             "table de chevet",
    "table à manger":     "table à manger",
    "table de salle à manger": "table à manger",
    "table d'appoint":    "table d'appoint",
    "canapé d'angle":     "canapé d'angle",
    "canapé convertible": "canapé convertible",
    "meuble tv":          "meuble tv",
    "meuble télé":        "meuble tv",
    "tête de lit":        "tête de lit",
    "table":              "table",
    "chaise":             "chaise",
    "tabouret":           "tabouret",
    "canapé":             "canapé",
    "sofa":               "canapé",
    "fauteuil":           "fauteuil",
    "lit":                "lit",
    "matelas":            "matelas",
    "armoire":            "armoire",
    "commode":            "commode",
    "étagère":            "étagère",
    "bibliothèque":       "bibliothèque",
    "bureau":             "bureau",
    "buffet":             "buffet",
    "vaisselier":         "vaisselier",
    "console":            "console",
    "banc":               "banc",
    "pouf":               "pouf",
    "miroir":             "miroir",
    "lampadaire":         "lampadaire",
    "lampe":              "lampe",
    "suspension":         "suspension",
    "tapis":              "tapis",
    "coussin":            "coussin",
    "rideau":             "rideau",
    "meuble":             "meuble",
}

# ─── STYLES ───
STYLE_MAP = {
    "scandinave":    "scandinave",
    "scandinavian":  "scandinave",
    "scandi":        "scandinave",
    "art déco":      "art déco",
    "moderne":       "moderne",
    "modern":        "moderne",
    "contemporain":  "contemporain",
    "industriel":    "industriel",
    "industrial":    "industriel",
    "vintage":       "vintage",
    "rétro":         "vintage",
    "classique":     "classique",
    "minimaliste":   "minimaliste",
    "épuré":         "minimaliste",
    "rustique":      "rustique",
    "campagne":      "rustique",
    "bohème":        "bohème",
    "boho":          "bohème",
    "japandi":       "japandi",
    "baroque":       "baroque",
    "design":        "design",
}

# ─── COLORS ───
COLOR_MAP = {
    "blanc":    "blanc",
    "blanche":  "blanc",
    "white":    "blanc",
    "noir":     "noir",
    "noire":    "noir",
    "black":    "noir",
    "gris":     "gris",
    "grise":    "gris",
    "grey":     "gris",
    "gray":     "gris",
    "beige":    "beige",
    "crème":    "beige",
    "bleu":     "bleu",
    "bleue":    "bleu",
    "blue":     "bleu",
    "vert":     "vert",
    "verte":    "vert",
    "green":    "vert",
    "rouge":    "rouge",
    "red":      "rouge",
    "jaune":    "jaune",
    "moutarde": "jaune",
    "marron":   "marron",
    "brun":     "marron",
    "chocolat": "marron",
    "rose":     "rose",
    "orange":   "orange",
    "terracotta": "terracotta",
    "violet":   "violet",
    "doré":     "doré",
    "dorée":    "doré",
    "argenté":  "argenté",
    "taupe":    "taupe",
    "naturel":  "naturel",
}

# ─── MATERIALS ───
MATERIAL_MAP = {
    "bois massif": "bois",
    "bois":        "bois",
    "wood":        "bois",
    "chêne":       "chêne",
    "noyer":       "noyer",
    "hêtre":       "hêtre",
    "pin":         "pin",
    "teck":        "teck",
    "bambou":      "bambou",
    "rotin":       "rotin",
    "osier":       "osier",
    "métal":       "métal",
    "metal":       "métal",
    "acier":       "acier",
    "fer forgé":   "fer forgé",
    "aluminium":   "aluminium",
    "verre":       "verre",
    "glass":       "verre",
    "marbre":      "marbre",
    "marble":      "marbre",
    "travertin":   "travertin",
    "granit":      "granit",
    "pierre":      "pierre",
    "céramique":   "céramique",
    "velours":     "velours",
    "bouclette":   "bouclette",
    "tissu":       "tissu",
    "lin":         "lin",
    "laine":       "laine",
    "coton":       "coton",
    "cuir":        "cuir",
    "leather":     "cuir",
    "résine":      "résine",
    "plastique":   "plastique",
}

# ─── ROOMS ───
ROOM_MAP = {
    "salle à manger": "salle à manger",
    "salle de bain":  "salle de bain",
    "chambre d'enfant": "chambre d'enfant",
    "salon":          "salon",
    "séjour":         "salon",
    "living":         "salon",
    "chambre":        "chambre",
    "bedroom":        "chambre",
    "cuisine":        "cuisine",
    "kitchen":        "cuisine",
    "entrée":         "entrée",
    "terrasse":       "extérieur",
    "jardin":         "extérieur",
    "extérieur":      "extérieur",
}

# ─── SHAPES ───
SHAPE_MAP = {
    "rectangulaire": "rectangulaire",
    "ronde":         "rond",
    "rond":          "rond",
    "carrée":        "carré",
    "carré":         "carré",
    "ovale":         "ovale",
}

# ─── SECTORS ───
# Plural "montres" only: the singular is the verb in "montre-moi"
SECTOR_KEYWORDS = {
    "montres":       ["montres", "bracelet", "bijou", "horlogerie", "chronographe"],
    "pret_a_porter": ["robe", "chemise", "pantalon", "vêtement", "mode", "sac", "chaussure"],
}
DEFAULT_SECTOR = "meubles"

# ─── PROMOTION / STOCK ───
PROMO_KEYWORDS = ["promo", "promotion", "solde", "réduction", "offre", "pas cher", "discount"]
STOCK_KEYWORDS = ["en stock", "disponible maintenant", "livrable rapidement", "in stock"]

# ─── ANAPHORIC PRONOUNS (resolved against recent history) ───
PRONOUN_TOKENS = {
    "la", "le", "les", "celle", "celui", "ceux", "celles", "ca", "cela",
    "celle-ci", "celui-ci", "celle-la", "celui-la", "it", "them", "this", "that", "one", "ones",
}
# "l'" elision is detected as a token prefix
PRONOUN_PREFIXES = ("l'",)


def _single_word_nouns() -> list:
    nouns = []
    for keyword in PRODUCT_TYPE_MAP:
        word = normalize(keyword)
        if " " not in word and "'" not in word and word != "meuble" and word not in nouns:
            nouns.append(word)
    return nouns


# Canonical single-word type nouns used by the ranker ("table", "chaise", "canape", ...)
CANONICAL_TYPE_NOUNS = _single_word_nouns()


# ═══════════════════════════════════════════
# INTENT CLASSIFIER BUCKETS
# ═══════════════════════════════════════════

# Greetings and small talk → simple_chat
GREETING_KEYWORDS = [
    "bonjour", "bonsoir", "salut", "coucou", "hello", "hey", "hi",
    "merci", "au revoir", "bonne journée", "ça va", "comment vas-tu",
    "qui es-tu", "qui êtes-vous", "thanks",
]

# Explicit show / find / list verbs → product_show
SHOW_KEYWORDS = [
    "montre-moi", "montrez-moi", "montre moi", "cherche", "recherche",
    "trouve", "trouver", "trouvez", "liste", "affiche", "tu as", "vous avez",
    "avez-vous", "je veux", "je voudrais", "show me", "find", "looking for",
]

# Quality / advice questions → product_chat
ADVICE_KEYWORDS = [
    "qualité", "conseil", "conseiller", "conseillez", "recommande",
    "recommandez", "recommandation", "avis", "entretien", "entretenir",
    "différence", "comparer", "solide", "durable", "garantie", "livraison",
    "confortable", "quel est le mieux", "advice",
]
