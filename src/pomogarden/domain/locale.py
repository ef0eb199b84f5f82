"""Message catalogue for the terminal presentation (es / pt / en).

Lookup falls back to the default language, then to the key itself, so
a missing translation never raises.
"""

from __future__ import annotations

DEFAULT_LANGUAGE = "es"

CATALOG: dict[str, dict[str, str]] = {
    "es": {
        "title": "🍅 Jardín Pomodoro",
        "mode_focus": "Enfoque",
        "mode_short": "Descanso Corto",
        "mode_long": "Descanso Largo",
        "status_ready": "Listo para cultivar",
        "status_growing": "Creciendo...",
        "status_paused": "En pausa",
        "garden_title": "Tu Jardín",
        "clear_confirm": (
            "¿Estás seguro de que quieres talar todo tu bosque? "
            "Esta acción no se puede deshacer."
        ),
        "mode_change_confirm": (
            "El temporizador está corriendo. ¿Quieres detenerlo y cambiar de modo?"
        ),
        "alert_tree": "¡Tiempo completado! Has cultivado: Un Árbol",
        "alert_flower": "¡Tiempo completado! Has cultivado: Una Flor",
        "alert_butterfly": "¡Tiempo completado! Has cultivado: Una Mariposa",
        "plants_label": "Plantas",
        "butterflies_label": "Mariposas",
        "theme_light": "🌞 Claro",
        "theme_dark": "🌚 Oscuro",
        "name_prompt": "Nombre del árbol:",
    },
    "pt": {
        "title": "🍅 Jardim Pomodoro",
        "mode_focus": "Foco",
        "mode_short": "Pausa Curta",
        "mode_long": "Pausa Longa",
        "status_ready": "Pronto para cultivar",
        "status_growing": "Crescendo...",
        "status_paused": "Pausado",
        "garden_title": "Seu Jardim",
        "clear_confirm": (
            "Tem certeza que deseja derrubar todo o bosque? Esta ação não pode ser desfeita."
        ),
        "mode_change_confirm": "O temporizador está em execução. Deseja parar e trocar o modo?",
        "alert_tree": "Tempo concluído! Você cultivou: Uma Árvore",
        "alert_flower": "Tempo concluído! Você cultivou: Uma Flor",
        "alert_butterfly": "Tempo concluído! Você cultivou: Uma Borboleta",
        "plants_label": "Plantas",
        "butterflies_label": "Borboletas",
        "theme_light": "🌞 Claro",
        "theme_dark": "🌚 Escuro",
        "name_prompt": "Nome da árvore:",
    },
    "en": {
        "title": "🍅 Pomodoro Garden",
        "mode_focus": "Focus",
        "mode_short": "Short Break",
        "mode_long": "Long Break",
        "status_ready": "Ready to grow",
        "status_growing": "Growing...",
        "status_paused": "Paused",
        "garden_title": "Your Garden",
        "clear_confirm": (
            "Are you sure you want to cut down your entire forest? This cannot be undone."
        ),
        "mode_change_confirm": "The timer is running. Stop it and switch modes?",
        "alert_tree": "Time's up! You grew: A Tree",
        "alert_flower": "Time's up! You grew: A Flower",
        "alert_butterfly": "Time's up! You grew: A Butterfly",
        "plants_label": "Plants",
        "butterflies_label": "Butterflies",
        "theme_light": "🌞 Light",
        "theme_dark": "🌚 Dark",
        "name_prompt": "Tree name:",
    },
}

SUPPORTED_LANGUAGES: tuple[str, ...] = tuple(CATALOG)


def is_supported(language: str | None) -> bool:
    """Whether *language* has a catalogue."""
    return language in CATALOG


class Translator:
    """Key → string lookup bound to one language."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = language if is_supported(language) else DEFAULT_LANGUAGE

    def translate(self, key: str) -> str:
        text = CATALOG[self.language].get(key)
        if text is None:
            text = CATALOG[DEFAULT_LANGUAGE].get(key, key)
        return text

    __call__ = translate
