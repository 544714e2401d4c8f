"""Tests for the template tokenizer."""

import unittest

from template_compiler import (
    Tokenizer,
    TokenKind,
    TagData,
    SourceLocation,
    TemplateSyntaxError,
    UnterminatedTag,
    UnterminatedExpression,
    tokenize,
)


def kinds(tokens):
    return [t.kind for t in tokens]


class TestTokenizer(unittest.TestCase):
    """Test tokenization of template source."""

    def test_plain_text_single_token(self):
        tokens = tokenize("  hello world  ")
        self.assertEqual(kinds(tokens), [TokenKind.TEXT, TokenKind.EOF])
        self.assertEqual(tokens[0].value, "hello world")

    def test_empty_source_is_just_eof(self):
        tokens = tokenize("   \n  ")
        self.assertEqual(kinds(tokens), [TokenKind.EOF])

    def test_balanced_braces(self):
        tokens = tokenize("{a{b}c}")
        self.assertEqual(kinds(tokens), [TokenKind.EXPR, TokenKind.EOF])
        self.assertEqual(tokens[0].value, "a{b}c")

    def test_expression_is_trimmed(self):
        tokens = tokenize("{  user.name  }")
        self.assertEqual(tokens[0].value, "user.name")

    def test_open_text_close(self):
        tokens = tokenize("<div>hi</div>")
        self.assertEqual(
            kinds(tokens),
            [TokenKind.OPEN, TokenKind.TEXT, TokenKind.CLOSE, TokenKind.EOF],
        )
        self.assertEqual(tokens[0].value, TagData("div", {}))
        self.assertEqual(tokens[1].value, "hi")
        self.assertEqual(tokens[2].value, "div")

    def test_whitespace_between_tokens_skipped(self):
        tokens = tokenize("<ul>\n  <li>a</li>\n  <li>b</li>\n</ul>")
        self.assertNotIn("", [t.value for t in tokens if t.kind == TokenKind.TEXT])
        self.assertEqual(kinds(tokens).count(TokenKind.TEXT), 2)

    def test_attribute_forms(self):
        tokens = tokenize('<input id="name" type=\'text\' disabled size=20 value={form.value}>')
        data = tokens[0].value
        self.assertEqual(data.tag, "input")
        self.assertEqual(data.attributes, {
            "id": "name",
            "type": "text",
            "disabled": True,
            "size": "20",
            "value": "{form.value}",
        })

    def test_dynamic_attribute_keeps_nested_braces(self):
        tokens = tokenize("<div style={{color: c}}/>")
        self.assertEqual(tokens[0].value.attributes["style"], "{{color: c}}")

    def test_attribute_names_allow_dashes(self):
        tokens = tokenize('<div data-id="7" aria-hidden/>')
        self.assertEqual(tokens[0].value.attributes, {"data-id": "7", "aria-hidden": True})

    def test_self_closing(self):
        self.assertEqual(tokenize("<br/>")[0].kind, TokenKind.SELF_CLOSE)
        self.assertEqual(tokenize("<br />")[0].kind, TokenKind.SELF_CLOSE)
        self.assertEqual(tokenize("<img src={s} />")[0].kind, TokenKind.SELF_CLOSE)

    def test_close_tag_name_trimmed(self):
        tokens = tokenize("<p>x</ p >")
        self.assertEqual(tokens[2].kind, TokenKind.CLOSE)
        self.assertEqual(tokens[2].value, "p")

    def test_text_stops_at_expression(self):
        tokens = tokenize("Hello, {name}!")
        self.assertEqual(kinds(tokens), [TokenKind.TEXT, TokenKind.EXPR, TokenKind.TEXT, TokenKind.EOF])
        self.assertEqual([t.value for t in tokens[:3]], ["Hello,", "name", "!"])

    def test_locations(self):
        tokens = tokenize("<div>\n  {x}</div>")
        self.assertEqual(tokens[0].loc, SourceLocation(1, 1))
        self.assertEqual(tokens[1].loc, SourceLocation(2, 3))
        self.assertEqual(tokens[2].loc, SourceLocation(2, 6))

    def test_eof_always_last(self):
        tokens = Tokenizer("<a/><b/>").tokenize()
        self.assertEqual(tokens[-1].kind, TokenKind.EOF)
        self.assertEqual(kinds(tokens).count(TokenKind.EOF), 1)

    # --- Failure policy ---

    def test_unterminated_open_tag(self):
        with self.assertRaises(UnterminatedTag):
            tokenize("<div")

    def test_unterminated_tag_after_attributes(self):
        with self.assertRaises(UnterminatedTag):
            tokenize('<div id="x" hidden')

    def test_unterminated_quoted_value(self):
        with self.assertRaises(UnterminatedTag):
            tokenize('<div id="x')

    def test_unterminated_close_tag(self):
        with self.assertRaises(UnterminatedTag):
            tokenize("<div>a</div")

    def test_unterminated_expression(self):
        with self.assertRaises(UnterminatedExpression):
            tokenize("{a")

    def test_unterminated_nested_expression(self):
        with self.assertRaises(UnterminatedExpression):
            tokenize("{a{b}")

    def test_unterminated_attribute_expression(self):
        with self.assertRaises(UnterminatedExpression):
            tokenize("<p a={b>")

    def test_errors_are_syntax_errors_with_location(self):
        with self.assertRaises(TemplateSyntaxError) as ctx:
            tokenize("ok {broken")
        self.assertEqual(ctx.exception.loc, SourceLocation(1, 4))
        self.assertIn("line 1, column 4", str(ctx.exception))

    def test_invalid_attribute_character(self):
        with self.assertRaises(TemplateSyntaxError):
            tokenize("<div @click={go}>x</div>")

    def test_empty_expression(self):
        for source in ("<p>{}</p>", "{   }", "<div id={}/>", "<div id={ \n }/>"):
            with self.assertRaises(TemplateSyntaxError) as ctx:
                tokenize(source)
            self.assertNotIsInstance(ctx.exception, UnterminatedExpression)
            self.assertIn("Empty expression", str(ctx.exception))

    def test_empty_expression_location(self):
        with self.assertRaises(TemplateSyntaxError) as ctx:
            tokenize("<p>\n  {}</p>")
        self.assertEqual(ctx.exception.loc, SourceLocation(2, 3))

    def test_nested_empty_braces_are_not_empty(self):
        tokens = tokenize("{{}}")
        self.assertEqual(tokens[0].value, "{}")


if __name__ == "__main__":
    unittest.main()
