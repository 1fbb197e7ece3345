"""Loop context -- loop.first, loop.last, loop.index, loop.length.

Demonstrates the loop variable in {% foreach %} and {% for %} blocks for
styling first/last items, row numbers and progress indicators.

Run:
    python app.py
"""

from curly import Environment

env = Environment()

table = env.from_string(
    "<table>\n"
    "{% foreach rows as row %}"
    '<tr class="{% if loop.first %}first{% elseif loop.last %}last{% else %}middle{% endif %}">'
    "<td>{loop.index}/{loop.length}</td><td>{row}</td></tr>\n"
    "{% endforeach %}"
    "</table>"
)

countdown = env.from_string(
    "{% for i in 1..5 %}{loop.revindex}{% if not loop.last %}, {% endif %}{% endfor %}"
)

rows = ["Alpha", "Beta", "Gamma", "Delta"]
output = table.render(rows=rows)


def main() -> None:
    print(output)
    print(countdown.render())


if __name__ == "__main__":
    main()
