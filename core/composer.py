# core/composer.py

import logging
from typing import Mapping, Optional

from core.script_repository import ScriptRepository
from core.templates import TemplateCatalog
from core.validation import validate_script
from data.script import Script

log = logging.getLogger(__name__)


class ScriptComposer:
    """
    Turns a filled-in template form into a saved script.

    Both calls block until the database worker has saved the result, so run
    them from a background thread, never from the database worker itself.
    """

    def __init__(self, catalog: TemplateCatalog, repository: ScriptRepository):
        self.catalog = catalog
        self.repository = repository

    def compose_new(self, template_name: str, form: Mapping[str, str],
                    user_id: Optional[str] = None) -> int:
        """
        1) Validate the form against its template
        2) Render the text and pick the client name (next number for the template)
        3) Insert, returning the new id
        """
        template = self.catalog.get(template_name)
        template.validate(form)

        # Tombstoned scripts keep their number
        sequence = self.repository.count_by_template(template.name, include_deleted=True).result() + 1
        script = validate_script(Script(
            template_type=template.name,
            content=template.render(form),
            client_name=template.client_name(form, sequence),
            form_data=dict(form),
            user_id=user_id,
        ))

        script_id = self.repository.insert(script).result()
        log.info("Saved %s script %d for %r", template.name, script_id, script.client_name)
        return script_id

    def recompose(self, script: Script, form: Mapping[str, str]) -> Script:
        """Re-render an existing script from an edited form and save it."""
        template = self.catalog.get(script.template_type)
        template.validate(form)

        edited = validate_script(script.edited(
            content=template.render(form),
            form_data=dict(form),
        ))
        self.repository.update(edited).result()
        return edited
