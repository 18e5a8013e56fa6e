#!/usr/bin/env python3
"""
Random fuzzer for the safetag recognizer.
Generates malformed tags and checks that recognition is atomic: every
attempt either returns a complete tag and a forward position, or returns
nothing and leaves the position where it was. Also checks that every
'<' filter_html leaves unescaped starts a safe, canonically written tag.
"""

import argparse
import random
import string
import sys
import time
import traceback

from safetag import HtmlTag, filter_html, is_safe, recognize, to_html

TAGS = [
    "div", "span", "p", "a", "img", "table", "ul", "ol", "li", "dl", "dt", "dd",
    "script", "style", "iframe", "object", "embed", "form", "input", "svg", "math",
    "b", "i", "em", "strong", "code", "pre", "blockquote", "h1", "h2", "h6", "br", "hr",
    "kbd", "sub", "sup", "s", "strike", "del", "ins", "noscript", "fieldset",
]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "width", "height",
    "onclick", "onload", "onerror", "data_x", "HREF", "Src", "name", "value",
]

URLS = [
    "http://example.com", "https://example.com/a?b=c", "ftp://example.com/f",
    "javascript:alert(1)", "JaVaScRiPt:alert(1)", "java\tscript:alert(1)",
    "vbscript:msgbox(1)", "data:text/html,<script>alert(1)</script>",
    "//evil.example", "/relative", "#frag", "mailto:a@b.c", "", " http://x",
]

SPECIAL_CHARS = [
    "\x00", "\x01", "\x0b", "\x0c", "\x7f",  # Control chars
    "\ufffd",  # Replacement character
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b", "\ufeff",  # Zero-width chars
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    """Generate random whitespace (including weird ones)."""
    ws = [" ", "\t", "\n", "\r", "\f", "\v", "\u00a0", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


def fuzz_tag_name():
    """Generate malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),  # Valid tag
        lambda: random.choice(TAGS).upper(),  # Uppercase
        lambda: random.choice(TAGS) + random_string(1, 5),  # Tag with suffix
        lambda: random_string(1, 10),  # Random string
        lambda: "",  # Empty
        lambda: "_" + random.choice(TAGS),  # Underscore prefix
        lambda: "0" + random.choice(TAGS),  # Numeric prefix
        lambda: "-" + random.choice(TAGS),  # Dash prefix
        lambda: random.choice(TAGS) + "-" + random.choice(TAGS),  # Dash in name
        lambda: " " + random.choice(TAGS),  # Space prefix
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),  # Special suffix
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate malformed attributes."""
    name_strategies = [
        lambda: random.choice(ATTRIBUTES),
        lambda: random_string(1, 15),
        lambda: "",
        lambda: "on" + random_string(2, 8),  # Event handler
        lambda: random.choice(SPECIAL_CHARS),
        lambda: "=",
        lambda: '"',
        lambda: ">",
    ]

    value_strategies = [
        lambda: random_string(0, 30),
        lambda: random.choice(URLS),
        lambda: "<script>alert(1)</script>",
        lambda: '"' + random_string() + '"',  # Extra quotes
        lambda: "'x'" + random.choice(ATTRIBUTES) + "=alert(1)",  # Attribute hidden behind a quote
        lambda: random.choice(SPECIAL_CHARS) * random.randint(1, 5),
        lambda: "",
        lambda: "x" * random.randint(100, 1000),  # Long value
    ]

    quote_styles = [
        ('="', '"'),
        ("='", "'"),
        ("=", ""),  # Unquoted
        (" = ", ""),  # Spaces around equals
        ("", ""),  # No value
        ('="', ""),  # Unclosed quote
        ("==", ""),  # Double equals
    ]

    name = random.choice(name_strategies)()
    value = random.choice(value_strategies)()
    quote_start, quote_end = random.choice(quote_styles)

    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    """Generate malformed opening tags."""
    tag = fuzz_tag_name()
    attrs = [fuzz_attribute() for _ in range(random.randint(0, 5))]
    attr_str = random_whitespace().join(attrs)
    if attrs and random.random() < 0.1:
        attr_str += " " + attrs[0]  # Duplicate attribute

    closings = [">", "/>", " >", " />", "/ >", "", ">>", ">/", "\x00>"]
    closing = random.choice(closings)

    # Sometimes corrupt the opening
    openings = ["<", "< ", "<\x00", "<<", "<!", "<?", "</"]
    opening = random.choice(openings) if random.random() < 0.2 else "<"

    return f"{opening}{tag}{random_whitespace()}{attr_str}{random_whitespace()}{closing}"


def fuzz_close_tag():
    """Generate malformed closing tags."""
    tag = fuzz_tag_name()
    ws = random_whitespace()

    variants = [
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag} >",
        f"</{tag}{ws}>",
        f"</{tag}",  # Unclosed
        f"</{tag}/>",  # Self-closing end tag
        f"<//{tag}>",  # Double slash
        f"</{tag} garbage>",  # Extra content
        f"</{tag} {fuzz_attribute()}>",  # Attribute in end tag
    ]
    return random.choice(variants)


def fuzz_comment():
    """Generate malformed comments."""
    content = random_string(0, 50)

    variants = [
        f"<!--{content}-->",
        f"<!-{content}-->",
        f"<!--{content}->",
        f"<!--{content}",
        f"<!---{content}--->",
        f"<!---->",
        f"<!-->",
        f"<!--{content}---->{content}-->",
        f"<!--{content}>",
        f"<!{content}>",
    ]
    return random.choice(variants)


def fuzz_text():
    """Generate text content with edge cases."""
    strategies = [
        lambda: random_string(1, 50),
        lambda: "<" + random_string(1, 5),  # Incomplete tag
        lambda: random_string() + ">" + random_string(),  # Stray >
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 10))),
        lambda: "\r\n" * random.randint(1, 5),  # Line endings
    ]
    return random.choice(strategies)()


def generate_fuzzed_html():
    """Generate a fuzzed snippet that starts with '<'."""
    strategies = [
        (fuzz_open_tag, 50),
        (fuzz_close_tag, 20),
        (fuzz_comment, 15),
        (lambda: "<" + fuzz_text(), 5),
    ]
    funcs, weights = zip(*strategies)
    head = random.choices(funcs, weights=weights, k=1)[0]()
    if not head.startswith("<"):
        head = "<" + head
    if random.random() < 0.3:
        head += fuzz_text()
    return head


def check_filtered(html):
    """Every '<' left unescaped by filter_html must start a safe tag written
    exactly as the serializer writes it."""
    filtered = filter_html(html)
    lt = filtered.find("<")
    while lt >= 0:
        tag, end = recognize(filtered, lt)
        if tag is None:
            return f"filter_html left a bare '<' at {lt}"
        if not is_safe(tag):
            return f"filter_html left an unsafe tag {tag!r}"
        if filtered[lt:end] != to_html(tag):
            return f"filter_html left non-canonical markup {filtered[lt:end]!r}"
        lt = filtered.find("<", end)
    return None


def check_invariants(html):
    """Return a description of the first broken invariant, or None."""
    problem = check_filtered(html)
    if problem:
        return problem

    tag, pos = recognize(html, 0)
    if tag is None:
        if pos != 0:
            return f"position moved to {pos} on failure"
        return None
    if not isinstance(tag, HtmlTag):
        return f"unexpected result type {type(tag).__name__}"
    if pos <= 0 or pos > len(html):
        return f"position {pos} out of range"
    if not tag.name:
        return "empty tag name"
    if tag.closing and tag.attributes:
        return "closing tag with attributes"
    if tag.classification != tag.classification:
        return "classification not stable"
    if not isinstance(is_safe(tag), bool):
        return "is_safe returned a non-bool"
    again, again_pos = recognize(to_html(tag), 0)
    if again is None or again_pos == 0:
        return f"serialized tag {to_html(tag)!r} is not recognized"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the recognizer."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    violations = []
    matches = 0

    print(f"Fuzzing safetag with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            problem = check_invariants(html)
        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if problem is not None:
            violations.append({"test_num": i, "html": html, "problem": problem})
            if verbose:
                print(f"  VIOLATION: Test {i}: {problem}")
        elif recognize(html, 0)[0] is not None:
            matches += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: safetag")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Recognized:     {matches}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:  # Show first 10
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if violations:
        print(f"\n{'='*60}")
        print("INVARIANT VIOLATIONS:")
        print(f"{'='*60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']}: {violation['problem']}")
            print(f"  HTML: {violation['html'][:200]!r}")

    if save_failures and (crashes or violations):
        filename = f"fuzz_failures_safetag_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']!r}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} ===\n")
                f.write(f"HTML:\n{violation['html']!r}\n")
                f.write(f"Problem: {violation['problem']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not violations


def main():
    parser = argparse.ArgumentParser(description="Fuzz the safetag recognizer with malformed tags")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed snippets (no recognition)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(repr(generate_fuzzed_html()))
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
