"""Exact-match text menu with canned image replies."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from botin.models import CardAction, HeroCard, OutgoingAttachment, ReplyPayload


class MenuSelector(str, Enum):
    GREETING = "hola"
    OPTION_1 = "1"
    OPTION_2 = "2"
    OPTION_3 = "3"
    # Submenu buttons send these URLs back as text.
    SUB_OPTION_1 = "www.facebok.com"
    SUB_OPTION_2 = "www.Twitter.com"
    SUB_OPTION_3 = "www.Youtube.com"
    UNRECOGNIZED = ""

    @classmethod
    def from_text(cls, text: str | None) -> "MenuSelector":
        if text:
            for member in cls:
                if member is not cls.UNRECOGNIZED and member.value == text:
                    return member
        return cls.UNRECOGNIZED


GREETING_IMAGE = "hola_032.jpg"

SOCIAL_MEDIA_IMAGE = OutgoingAttachment(
    name="redes-sociales.jpg",
    content_type="image/jpeg",
    content_url="https://www.telam.com.ar/advf/imagenes/2017/11/5a0c4c77de733_645x362.jpg",
)
COMPANY_INFO_IMAGE = OutgoingAttachment(
    name="informacion-empresa.png",
    content_type="image/png",
    content_url="https://e.rpp-noticias.io/normal/2016/09/26/111411_252455.png",
)
BUSINESS_HOURS_IMAGE = OutgoingAttachment(
    name="horarios.jpg",
    content_type="image/jpeg",
    content_url="https://www.uneve.edu.mx/alumnos/PDF/horarios/horarios.jpg",
)

GREETING_TEXT = "hola, espero que este teniendo un buen dia"
SOCIAL_MEDIA_TEXT = "Aqui se muestran las redes sociales"
COMPANY_INFO_TEXT = "A qui se muestra la informacion de la empresa"
BUSINESS_HOURS_TEXT = "A qui se muesta los horarios de atencion a clientes."
NOT_UNDERSTOOD_TEXT = "lo siento no entiendo lo que dices"

MENU_PROMPT = "Elije la opcion que desees consultar por favor"
SUBMENU_PROMPT = "Selecciona la red social que desees consultar"

MENU_BUTTONS = (
    CardAction(title="1. Redes sociales", value=MenuSelector.OPTION_1.value),
    CardAction(title="2. Informacion de la empresa", value=MenuSelector.OPTION_2.value),
    CardAction(title="3. Horarios", value=MenuSelector.OPTION_3.value),
)
SUBMENU_BUTTONS = (
    CardAction(title="1. Facebook", value=MenuSelector.SUB_OPTION_1.value),
    CardAction(title="2. Twitter", value=MenuSelector.SUB_OPTION_2.value),
    CardAction(title="3. Youtube", value=MenuSelector.SUB_OPTION_3.value),
)


class MenuDispatcher:
    def __init__(self, resources_dir: str | Path) -> None:
        self._resources_dir = Path(resources_dir)

    def render_menu(self) -> ReplyPayload:
        return ReplyPayload(attachments=[HeroCard(text=MENU_PROMPT, buttons=MENU_BUTTONS)])

    def render_submenu(self) -> ReplyPayload:
        return ReplyPayload(attachments=[HeroCard(text=SUBMENU_PROMPT, buttons=SUBMENU_BUTTONS)])

    def greeting_attachment(self) -> OutgoingAttachment:
        return OutgoingAttachment.inline(self._resources_dir / GREETING_IMAGE)

    def dispatch(self, text: str | None) -> list[ReplyPayload]:
        """Map a text turn to the replies it should produce, in send order."""
        selector = MenuSelector.from_text(text)

        if selector is MenuSelector.GREETING:
            return [
                ReplyPayload(text=GREETING_TEXT, attachments=[self.greeting_attachment()]),
                self.render_menu(),
            ]
        if selector is MenuSelector.OPTION_1:
            return [
                self.render_submenu(),
                ReplyPayload(text=SOCIAL_MEDIA_TEXT, attachments=[SOCIAL_MEDIA_IMAGE]),
            ]
        if selector is MenuSelector.OPTION_2:
            return [ReplyPayload(text=COMPANY_INFO_TEXT, attachments=[COMPANY_INFO_IMAGE])]
        if selector is MenuSelector.OPTION_3:
            return [ReplyPayload(text=BUSINESS_HOURS_TEXT, attachments=[BUSINESS_HOURS_IMAGE])]

        # Submenu selections land here as well; they have no branch of their own.
        return [ReplyPayload(text=NOT_UNDERSTOOD_TEXT)]
