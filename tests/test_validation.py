# tests/test_validation.py

import pytest

from conftest import make_script
from core.config import MAX_CONTENT_LENGTH
from core.errors import ValidationError
from core.validation import (
    validate_content,
    validate_firebase_id,
    validate_script,
    validate_template_name,
    validate_user_id,
)


class TestContent:

    def test_blank_content(self):
        with pytest.raises(ValidationError):
            validate_content("   ")

    def test_too_long(self):
        with pytest.raises(ValidationError):
            validate_content("x" * (MAX_CONTENT_LENGTH + 1))

    def test_content_is_returned_untouched(self):
        assert validate_content("Folio: 1\n") == "Folio: 1\n"


class TestIdentifiers:

    @pytest.mark.parametrize("name", ["", "../etc", "x; DROP TABLE saved_scripts", "<script>"])
    def test_bad_template_names(self, name):
        with pytest.raises(ValidationError):
            validate_template_name(name)

    def test_template_name_is_trimmed(self):
        assert validate_template_name(" SOPORTE ") == "SOPORTE"

    def test_user_id(self):
        assert validate_user_id("user_01-a") == "user_01-a"
        with pytest.raises(ValidationError):
            validate_user_id("user 01")

    def test_firebase_id(self):
        assert validate_firebase_id("Ab12") == "Ab12"
        with pytest.raises(ValidationError):
            validate_firebase_id("ab-12")


class TestScript:

    def test_valid_script_passes(self):
        script = make_script(user_id="u1", firebase_id="abc")
        assert validate_script(script) is script

    def test_bad_user_id_fails(self):
        with pytest.raises(ValidationError):
            validate_script(make_script(user_id="not valid"))
