"""Shared fixtures: a sample form exercising every supported control."""

from typing import Any, Callable, Dict, Optional

import pytest
from bs4 import BeautifulSoup

from domform.form import Form


SAMPLE_FORM_HTML = """<!DOCTYPE html>
<html>
<head><title>Sample form</title></head>
<body>
<form method="post" action="/submit">
    <label for="animal">Animal</label>
    <div><input id="animal" name="animal" value="Cat"></div>
    <div><input name="required" value="Present" required></div>
    <div><input name="readonly" value="Fixed" readonly></div>
    <div><input name="disabled" value="Off" disabled></div>
    <div><input type="hidden" name="hidden" value="secret"></div>
    <div><input type="url" name="url" value="https://example.com"></div>
    <div><input type="email" name="email" value="someone@example.com"></div>
    <div><input type="email" name="bcc" value="someone@example.com" multiple></div>
    <div><input type="number" name="numeric" value="0"></div>
    <div><input type="range" name="range" min="0" max="100000" value="50"></div>
    <div><input type="color" name="color" value="#000000"></div>
    <div><input type="checkbox" name="checkbox" value="checked"></div>
    <div><input type="checkbox" name="required-checkbox" value="agreed" checked required></div>
    <div>
        <input type="radio" name="favourite-car" value="ford" required>
        <input type="radio" name="favourite-car" value="mercedes" checked required>
        <input type="radio" name="favourite-car" value="volvo">
    </div>
    <div>
        <input type="radio" name="favourite-animal" value="lions">
        <input type="radio" name="favourite-animal" value="tigers">
    </div>
    <div><input type="number" name="minimum" min="1" value="1"></div>
    <div><input type="number" name="maximum" max="100" value="100"></div>
    <div><input type="number" name="stepped-integer" step="3" value="3"></div>
    <div><input type="number" name="stepped-float" step="0.1" value="0.1"></div>
    <div><input type="datetime-local" name="datetime-local" value="2023-01-01T00:00"></div>
    <div><input type="datetime-local" name="datetime-local-with-min" min="2018-06-07T00:00" value="2018-06-07T00:00"></div>
    <div><input type="datetime-local" name="datetime-local-with-max" max="2018-06-14T00:00" value="2018-06-14T00:00"></div>
    <div><input type="month" name="month" value="2023-01"></div>
    <div><input type="month" name="month-with-min" min="2018-03" value="2018-03"></div>
    <div><input type="month" name="month-with-max" max="2018-07" value="2018-07"></div>
    <div><input type="week" name="week" min="2013-W28" max="2013-W32" value="2013-W30"></div>
    <div><input type="time" name="time" min="09:00" max="17:00" value="12:00"></div>
    <div><input name="postcode" pattern="[A-Z]{1,2}[0-9][A-Z0-9]? [0-9][A-Z]{2}" value="AA1 1AA"></div>
    <div>
        <select name="select">
            <option value="lions">Lions</option>
            <option value="tigers">Tigers</option>
            <option value="bears">Bears</option>
        </select>
    </div>
    <div>
        <select name="select-with-implicit-values">
            <option>Jazz</option>
            <option>Blues</option>
            <option>Rock and roll</option>
        </select>
    </div>
    <div>
        <select name="select-with-selected-option">
            <option value="potatoes">Potatoes</option>
            <option value="carrots" selected>Carrots</option>
            <option value="turnips">Turnips</option>
        </select>
    </div>
    <div>
        <select name="select-with-optgroups">
            <optgroup label="Fruit">
                <option value="apples">Apples</option>
                <option value="pears">Pears</option>
            </optgroup>
            <optgroup label="Vegetables">
                <option value="carrots">Carrots</option>
            </optgroup>
        </select>
    </div>
    <div>
        <select name="multi-select[]" multiple>
            <option value="ford">Ford</option>
            <option value="iveco">Iveco</option>
            <option value="volvo">Volvo</option>
            <option value="scania">Scania</option>
        </select>
    </div>
    <div>
        <select name="multi-select-with-selected[]" multiple>
            <option value="red" selected>Red</option>
            <option value="green">Green</option>
            <option value="blue" selected>Blue</option>
        </select>
    </div>
    <div>
        <input type="checkbox" name="toppings[]" value="cheese" checked>
        <input type="checkbox" name="toppings[]" value="ham">
        <input type="checkbox" name="toppings[]" value="pineapple">
    </div>
    <div><textarea name="textarea">original</textarea></div>
    <div><span data-name="populated-span"></span></div>
    <button type="submit">Submit</button>
</form>
</body>
</html>
"""


def expected_value(value: Any) -> Any:
    """The serialized form of a record value."""
    if isinstance(value, list):
        return [str(entry) for entry in value]
    return str(value)


def required_fields(form: Form) -> Dict[str, str]:
    """Record holding the current value of every required field.

    Radios of one group overwrite each other, so the last required radio of a
    group wins.
    """
    return {
        element["name"]: element.get("value", "")
        for element in form.element.select("[name][required]")
    }


@pytest.fixture
def soup() -> BeautifulSoup:
    return BeautifulSoup(SAMPLE_FORM_HTML, "html.parser")


@pytest.fixture
def form(soup: BeautifulSoup) -> Form:
    return Form(soup.select("form"))


@pytest.fixture
def submit_with_required(form: Form) -> Callable[..., Optional[Dict[str, Any]]]:
    """Submit the sample form with its required fields plus the given input.

    A real submission (POST from a browser) always carries the required
    fields, tests usually only care about one more field. The submitted
    fields are read back from the result unless readback is False.
    """

    def submit(data: Optional[Dict[str, Any]] = None, readback: bool = True):
        data = data or {}
        result = form.submit({**required_fields(form), **data})

        if readback:
            for key, value in data.items():
                assert result[key] == expected_value(value)

        return result

    return submit


@pytest.fixture
def make_form() -> Callable[..., Form]:
    """Build a Form over a freshly parsed copy of the sample form."""

    def build(**kwargs: Any) -> Form:
        return Form(BeautifulSoup(SAMPLE_FORM_HTML, "html.parser").select("form"), **kwargs)

    return build
