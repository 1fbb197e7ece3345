"""Custom filters -- extending curly with add_filter and the filter registry.

Filters take exactly one value. Raise FilterValueError for input a filter
cannot handle and the render fails with the template location attached.

Run:
    python app.py
"""

from curly import DictLoader, Environment, TemplateConfig
from curly.environment import FilterValueError

templates = {
    "invoice.html": (
        "<h1>Invoice</h1>\n"
        "{% foreach items as item %}"
        "<p>{item.name|upper}: {item.price|money} {item.rating|stars}</p>\n"
        "{% endforeach %}"
        "<p>{items|length} {items|length|plural}, total {total|money}</p>\n"
    ),
}

env = Environment(DictLoader(templates), config=TemplateConfig(cache_enabled=False))


def money(amount) -> str:
    """Format a number as dollars."""
    try:
        return f"${float(amount):,.2f}"
    except (TypeError, ValueError):
        raise FilterValueError("money", amount, "a number") from None


env.add_filter("money", money)
env.filters["plural"] = lambda n: "item" if n == 1 else "items"

items = [
    {"name": "Widget A", "price": 19.99, "rating": 4.5},
    {"name": "Widget B", "price": 1250, "rating": 3},
]

output = env.render("invoice.html", items=items, total=1269.99)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
