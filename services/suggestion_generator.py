"""
Suggestion Generator

Generates follow-up quick replies based on intent, filters and results.
"""

from typing import List, Optional

from models import Intent, AttributeFilter, Product

MAX_SUGGESTIONS = 4


def generate_suggestions(
    intent: Intent,
    filters: Optional[AttributeFilter],
    products: List[Product],
) -> List[str]:
    """Generate follow-up suggestions based on context."""
    suggestions = []

    # Small talk: open the catalog
    if intent == Intent.SIMPLE_CHAT:
        suggestions.append("Voir les canapés")
        suggestions.append("Je cherche une table basse")
        suggestions.append("Quelles sont vos promotions ?")
        suggestions.append("Des idées pour mon salon")
        return suggestions[:MAX_SUGGESTIONS]

    product_type = filters.type if filters and filters.type else None

    # Qualification: help the user complete the request
    if not products and (filters is None or not filters.is_search):
        suggestions.append("Un canapé")
        suggestions.append("Une table basse")
        suggestions.append("Une chaise")
        suggestions.append("Un lit")
        return suggestions[:MAX_SUGGESTIONS]

    # Zero results: loosen the request
    if not products:
        if product_type:
            suggestions.append(f"Voir tous les modèles de {product_type}")
        suggestions.append("Voir les nouveautés")
        suggestions.append("Quelles sont vos promotions ?")
        return suggestions[:MAX_SUGGESTIONS]

    if len(products) == 1:
        p = products[0]
        suggestions.append(f"Quelles sont les dimensions de {p.title} ?")
        suggestions.append(f"{p.title} existe-t-il dans une autre couleur ?")
    elif product_type:
        if not filters.style:
            suggestions.append(f"Un modèle de {product_type} scandinave")
        if not filters.color:
            suggestions.append("En blanc")
        if not filters.price_range:
            suggestions.append("Moins de 300€")

    if not filters or not filters.on_sale:
        suggestions.append("Uniquement les promotions")

    return suggestions[:MAX_SUGGESTIONS]
