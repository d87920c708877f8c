"""Aggregation of component template occurrences into template facts."""

import logging
from typing import Iterable, List

from extraction.models import (
    BindingInfo,
    DirectiveInfo,
    EventInfo,
    TemplateInfo,
    TemplateOccurrence,
)

logger = logging.getLogger(__name__)


def extract_template(occurrences: Iterable[TemplateOccurrence]) -> TemplateInfo:
    """Group occurrences into directive, binding, event and component lists.

    No inference happens here: occurrences keep the order the component
    parser reported them in, and component names are de-duplicated keeping
    the first sighting.
    """
    directives: List[DirectiveInfo] = []
    bindings: List[BindingInfo] = []
    events: List[EventInfo] = []
    components: List[str] = []

    for occurrence in occurrences:
        if occurrence.category == "directive":
            directives.append(
                DirectiveInfo(
                    name=occurrence.name,
                    modifiers=occurrence.modifiers,
                    value=occurrence.value,
                    element=occurrence.element,
                    start_position=occurrence.start_position,
                )
            )
        elif occurrence.category == "binding":
            bindings.append(
                BindingInfo(
                    name=occurrence.name,
                    expression=occurrence.value or "",
                    element=occurrence.element,
                    start_position=occurrence.start_position,
                )
            )
        elif occurrence.category == "event":
            events.append(
                EventInfo(
                    name=occurrence.name,
                    modifiers=occurrence.modifiers,
                    handler=occurrence.value or "",
                    element=occurrence.element,
                    start_position=occurrence.start_position,
                )
            )
        elif occurrence.category == "component":
            if occurrence.name not in components:
                components.append(occurrence.name)
        else:
            logger.debug("Ignoring template occurrence of category %s", occurrence.category)

    return TemplateInfo(
        directives=tuple(directives),
        bindings=tuple(bindings),
        events=tuple(events),
        components=tuple(components),
    )
