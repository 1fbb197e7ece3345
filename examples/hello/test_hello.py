"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "Hello, World!"

    def test_rerender_with_different_context(self, example_app) -> None:
        assert example_app.template.render(name="ada") == "Hello, Ada!"

    def test_missing_name(self, example_app) -> None:
        assert example_app.template.render() == "Hello, !"

    def test_escaped(self, example_app) -> None:
        assert example_app.template.render(name="<b>") == "Hello, &lt;b&gt;!"
