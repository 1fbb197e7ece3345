"""Hello -- one output expression with a filter.

The template comes from a string, so no loader or cache is involved.

Run:
    python app.py
"""

from curly import Environment

env = Environment()
template = env.from_string("Hello, {name|capitalize}!")
output = template.render(name="world")


def main() -> None:
    print(output)
    print(repr(template.render()))  # name is missing: 'Hello, !'
    for name in ("ada", "grace", "<script>"):
        print(template.render({"name": name}))


if __name__ == "__main__":
    main()
