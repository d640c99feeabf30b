"""
Message catalog for user-facing text.

Engines and the delivery schedule look strings up by key so that operator
logs and user-visible messages never share wording by accident.
"""
from datetime import date
from typing import Optional

from storefront.config import settings

FALLBACK_LOCALE = "en"

MESSAGES = {
    "en": {
        "cart.required": "Cart is required",
        "cart.variant_required": "Product variant is required",
        "cart.item_required": "Cart item is required",
        "cart.invalid_action": "Invalid action type",
        "cart.empty": "Your cart is empty",
        "cart.add_failed": "We couldn't add this item to your cart. Please try again.",
        "cart.update_failed": "We couldn't update your cart item. Please try again.",
        "cart.generic_failure": "Something went wrong. Please try again.",
        "cart.clear_failed": "We couldn't clear your cart. Please try again.",
        "cart.merge_failed": "We couldn't merge your cart items. Please try again.",
        "quantity.not_positive": "Quantity must be greater than 0",
        "quantity.negative": "Quantity cannot be negative",
        "quantity.exceeds_maximum": "Quantity cannot exceed {maximum}",
        "quantity.cannot_add_more": "Cannot add more items. Maximum quantity is {maximum}",
        "quantity.out_of_stock": "{name} is out of stock",
        "quantity.only_more_available": "Only {available} more items can be added for {name}",
        "quantity.only_available": "Only {available} items available for {name}",
        "quantity.no_more_available": "No more items available for {name}",
        "delivery.titles.courier": "Delivery date and time",
        "delivery.titles.pickup": "Pickup date",
        "delivery.subtitles.courier": "Choose when our courier should bring your order",
        "delivery.subtitles.pickup": "Choose when you will collect your order from the store",
        "delivery.placeholders.courier": "Select delivery date and time",
        "delivery.placeholders.pickup": "Pick up between {start_date} and {end_date}",
        "delivery.relative.today": "Today",
        "delivery.relative.tomorrow": "Tomorrow",
    },
    "fr": {
        "cart.required": "Le panier est requis",
        "cart.variant_required": "La variante du produit est requise",
        "cart.item_required": "L'article du panier est requis",
        "cart.invalid_action": "Type d'action invalide",
        "cart.empty": "Votre panier est vide",
        "cart.add_failed": "Nous n'avons pas pu ajouter cet article. Veuillez réessayer.",
        "cart.update_failed": "Nous n'avons pas pu modifier cet article. Veuillez réessayer.",
        "cart.generic_failure": "Une erreur est survenue. Veuillez réessayer.",
        "cart.clear_failed": "Nous n'avons pas pu vider votre panier. Veuillez réessayer.",
        "cart.merge_failed": "Nous n'avons pas pu fusionner vos paniers. Veuillez réessayer.",
        "quantity.not_positive": "La quantité doit être supérieure à 0",
        "quantity.negative": "La quantité ne peut pas être négative",
        "quantity.exceeds_maximum": "La quantité ne peut pas dépasser {maximum}",
        "quantity.cannot_add_more": "Impossible d'ajouter plus d'articles. Quantité maximale : {maximum}",
        "quantity.out_of_stock": "{name} est en rupture de stock",
        "quantity.only_more_available": "Seulement {available} articles de plus pour {name}",
        "quantity.only_available": "Seulement {available} articles disponibles pour {name}",
        "quantity.no_more_available": "Plus d'articles disponibles pour {name}",
        "delivery.titles.courier": "Date et heure de livraison",
        "delivery.titles.pickup": "Date de retrait",
        "delivery.subtitles.courier": "Choisissez quand notre livreur doit passer",
        "delivery.subtitles.pickup": "Choisissez quand vous retirerez votre commande en magasin",
        "delivery.placeholders.courier": "Choisissez une date et un créneau",
        "delivery.placeholders.pickup": "Retrait entre le {start_date} et le {end_date}",
        "delivery.relative.today": "Aujourd'hui",
        "delivery.relative.tomorrow": "Demain",
    },
}

MONTHS_SHORT = {
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
    "fr": ["janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.", "août", "sept.", "oct.", "nov.", "déc."],
}

WEEKDAYS = {
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
    "fr": ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"],
}


def resolve_locale(locale: Optional[str] = None) -> str:
    locale = (locale or settings.DEFAULT_LOCALE or FALLBACK_LOCALE).lower()
    return locale if locale in MESSAGES else FALLBACK_LOCALE


def translate(key: str, locale: Optional[str] = None, **kwargs) -> str:
    catalog = MESSAGES[resolve_locale(locale)]
    template = catalog.get(key) or MESSAGES[FALLBACK_LOCALE].get(key, key)
    return template.format(**kwargs) if kwargs else template


def localize_date(d: date, fmt: str = "short", locale: Optional[str] = None) -> str:
    """
    short   -> "Oct 19" / "19 oct."
    display -> "Monday, Oct 19" / "lundi 19 oct."
    """
    locale = resolve_locale(locale)
    month = MONTHS_SHORT[locale][d.month - 1]
    if locale == "fr":
        short = f"{d.day} {month}"
        if fmt == "display":
            return f"{WEEKDAYS[locale][d.weekday()]} {short}"
        return short
    short = f"{month} {d.day:02d}"
    if fmt == "display":
        return f"{WEEKDAYS[locale][d.weekday()]}, {short}"
    return short
