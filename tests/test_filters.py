"""Tests for built-in filters and the filter registry."""

import pytest

from curly import Environment, Markup, TemplateRuntimeError, UnknownFilterError
from curly.environment.exceptions import ErrorCode, FilterValueError
from curly.environment.filters import DEFAULT_FILTERS, round_half_away


def _render(env: Environment, source: str, **ctx) -> str:
    return env.from_string(source).render(**ctx)


class TestTextFilters:
    """Case and whitespace filters."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{s|upper}", "HELLO WORLD"),
            ("{s|uppercase}", "HELLO WORLD"),
            ("{s|lower}", "hello world"),
            ("{s|lowercase}", "hello world"),
            ("{s|capitalize}", "Hello world"),
            ("{s|title}", "Hello World"),
        ],
    )
    def test_case_filters(self, env, source, expected):
        assert _render(env, source, s="hello WORLD") == expected

    def test_trim(self, env):
        assert _render(env, "[{s|trim}]", s="  padded \n") == "[padded]"

    def test_chain(self, env):
        assert _render(env, "{s|trim|upper}", s="  hi  ") == "HI"

    def test_numbers_are_stringified(self, env):
        assert _render(env, "{n|upper}", n=42) == "42"


class TestLength:
    """length / count."""

    def test_list(self, env):
        assert _render(env, "{items|length}", items=[1, 2, 3]) == "3"

    def test_count_alias(self, env):
        assert _render(env, "{items|count}", items={"a": 1}) == "1"

    def test_string(self, env):
        assert _render(env, "{s|length}", s="héllo") == "5"

    def test_empty(self, env):
        assert _render(env, "{items|length}", items=[]) == "0"

    def test_missing_value_renders_empty(self, env):
        assert _render(env, "[{items|length}]") == "[]"


class TestRound:
    """round: nearest integer, halves away from zero."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2.5, 3),
            (3.5, 4),
            (-2.5, -3),
            (2.4, 2),
            (7, 7),
            ("4.6", 5),
            (" 1.5 ", 2),
            (True, 1),
        ],
    )
    def test_round_half_away(self, value, expected):
        assert round_half_away(value) == expected

    def test_round_in_template(self, env):
        assert _render(env, "{price|round}", price=19.5) == "20"

    @pytest.mark.parametrize("value", ["abc", "", "nan", "inf", [1]])
    def test_round_rejects_non_numbers(self, value):
        with pytest.raises(FilterValueError):
            round_half_away(value)

    def test_round_error_in_template(self, env):
        template = env.from_string("line one\n{price|round}", name="product.html")
        with pytest.raises(TemplateRuntimeError) as exc_info:
            template.render(price="abc")
        err = exc_info.value
        assert err.code == ErrorCode.FILTER_ERROR
        assert err.template_name == "product.html"
        assert err.lineno == 2
        assert err.expression == "price|round"
        assert err.values == {"price": "abc"}
        assert "round expects a number" in err.message


class TestStars:
    """stars: rating as filled/empty glyphs."""

    @pytest.mark.parametrize(
        ("rating", "expected"),
        [
            (0, "☆☆☆☆☆"),
            (3, "★★★☆☆"),
            (4.5, "★★★★★"),
            (4.4, "★★★★☆"),
            (5, "★★★★★"),
            (9, "★★★★★"),
            (-2, "☆☆☆☆☆"),
            ("2", "★★☆☆☆"),
        ],
    )
    def test_stars(self, env, rating, expected):
        assert _render(env, "{r|stars}", r=rating) == expected

    def test_stars_rejects_non_numbers(self, env):
        with pytest.raises(TemplateRuntimeError) as exc_info:
            _render(env, "{r|stars}", r="great")
        assert "stars expects a number" in str(exc_info.value)


class TestRaw:
    """raw / safe opt out of escaping."""

    def test_raw_returns_markup(self):
        assert isinstance(DEFAULT_FILTERS["raw"]("<b>"), Markup)

    @pytest.mark.parametrize("name", ["raw", "safe"])
    def test_not_escaped(self, env, name):
        assert _render(env, f"{{html|{name}}}", html="<b>hi</b>") == "<b>hi</b>"

    def test_filter_after_raw_is_escaped_again(self, env):
        # upper returns a plain str, so the value is no longer trusted
        assert _render(env, "{html|raw|upper}", html="<b>") == "&lt;B&gt;"


class TestFilterRegistry:
    """Copy-on-write filter registry."""

    def test_add_filter(self, env):
        env.add_filter("shout", lambda v: str(v).upper() + "!")
        assert _render(env, "{name|shout}", name="hi") == "HI!"

    def test_registry_dict_interface(self, env):
        env.filters["reverse"] = lambda v: str(v)[::-1]
        assert "reverse" in env.filters
        assert env.filters["reverse"]("abc") == "cba"
        assert env.filters.get("missing") is None
        assert len(env.filters) == len(DEFAULT_FILTERS) + 1

    def test_update(self, env):
        env.filters.update({"a": str, "b": str})
        assert {"a", "b"} <= set(env.filters.keys())

    def test_delete_makes_filter_unknown(self, env):
        del env.filters["stars"]
        with pytest.raises(UnknownFilterError):
            env.from_string("{r|stars}")
        assert "stars" in DEFAULT_FILTERS

    def test_non_callable_rejected(self, env):
        with pytest.raises(TypeError):
            env.filters["bad"] = "not callable"
        with pytest.raises(TypeError):
            env.filters.update({"bad": 3})

    def test_parsed_template_keeps_snapshot(self, env):
        env.add_filter("tag", lambda v: f"<{v}>")
        template = env.from_string("{x|tag}")
        env.add_filter("tag", lambda v: f"[{v}]")
        assert template.render(x="a") == "&lt;a&gt;"
        assert env.from_string("{x|tag}").render(x="a") == "[a]"

    def test_environments_do_not_share_filters(self):
        first = Environment()
        second = Environment()
        first.add_filter("only_here", str)
        assert "only_here" not in second.filters

    def test_custom_filter_exception_becomes_runtime_error(self, env):
        def explode(value):
            raise KeyError("missing")

        env.add_filter("explode", explode)
        template = env.from_string("ok\n{x|explode}", name="t.html")
        with pytest.raises(TemplateRuntimeError) as exc_info:
            template.render(x=1)
        err = exc_info.value
        assert err.lineno == 2
        assert err.expression == "{x|explode}"
        assert isinstance(err.__cause__, KeyError)
