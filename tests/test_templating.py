from dataclasses import dataclass

import pytest

from semrelease.templating import Template, TemplateError


@dataclass
class _Data:
    Version: str
    Project: str


def test_plain_field_from_mapping():
    assert Template("v{{.Version}}").render({"Version": "1.2.3"}) == "v1.2.3"


def test_field_from_object_attributes():
    out = Template("{{.Project}}/v{{.Version}}").render(_Data(Version="1.2.3", Project="api"))
    assert out == "api/v1.2.3"


def test_nested_field_chain():
    assert Template("{{.A.B}}").render({"A": {"B": "deep"}}) == "deep"


def test_root_reference():
    data = {"Name": "root-value"}
    assert Template("{{$.Name}}").render(data) == "root-value"


@pytest.mark.parametrize("value, expected", [("api", "yes"), ("", "no")])
def test_if_else(value, expected):
    assert Template("{{if .Project}}yes{{else}}no{{end}}").render({"Project": value}) == expected


def test_else_if_chain():
    tmpl = Template("{{if .A}}first{{else if .B}}second{{else}}third{{end}}")
    assert tmpl.render({"A": "", "B": "x"}) == "second"
    assert tmpl.render({"A": "", "B": ""}) == "third"
    assert tmpl.render({"A": "x", "B": "x"}) == "first"


def test_range_rebinds_dot():
    assert Template("{{range .Items}}{{.}};{{end}}").render({"Items": ["a", "b"]}) == "a;b;"


def test_range_else_on_empty():
    assert Template("{{range .Items}}x{{else}}none{{end}}").render({"Items": []}) == "none"


def test_range_can_reach_root():
    out = Template("{{range .Items}}{{$.P}}{{end}}").render({"P": "z", "Items": [1, 2, 3]})
    assert out.count("z") == 3
    assert set(out) == {"z"}


def test_range_over_structs():
    items = [_Data(Version="1.0.0", Project="a"), _Data(Version="2.0.0", Project="b")]
    out = Template("{{range .Items}}{{.Project}}{{end}}").render({"Items": items})
    assert out == "ab"


def test_with_block():
    tmpl = Template("{{with .S}}<{{.}}>{{else}}empty{{end}}")
    assert tmpl.render({"S": ""}) == "empty"
    assert "value" in tmpl.render({"S": "value"})


def test_trim_markers():
    assert Template("a  {{- .X -}}  b").render({"X": "-"}) == "a-b"


def test_comment_is_dropped():
    assert Template("x{{/* note */}}y").render({}) == "xy"


def test_string_literal():
    assert Template('{{"hi"}}').render({}) == "hi"


def test_missing_attribute_raises():
    with pytest.raises(TemplateError):
        Template("{{.Missing}}").render(_Data(Version="1", Project="p"))


@pytest.mark.parametrize(
    "source",
    [
        "{{if .A}}never closed",
        "{{end}}",
        "{{else}}",
        "{{unknownfunc .A}}",
        "{{.A .B}}",
        "{{}}",
        "{{.A",
        "{{range $i, $e := .Items}}{{end}}",
        "{{/* open comment }}",
    ],
)
def test_parse_errors(source):
    with pytest.raises(TemplateError):
        Template(source)


def test_range_over_string_raises():
    with pytest.raises(TemplateError):
        Template("{{range .S}}{{end}}").render({"S": "abc"})