"""Tests for short code generation."""

import re

from brevly.shortcode import ShortCodeGenerator


BASE62_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


class TestShortCodeGenerator:
    """Test short code generator."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)
        code = generator.generate_random()

        assert len(code) == 6
        assert BASE62_PATTERN.match(code)

    def test_generate_random_custom_length(self):
        """Test random generation with custom length."""
        generator = ShortCodeGenerator()
        code = generator.generate_random(length=10)

        assert len(code) == 10

    def test_generate_random_uniqueness(self):
        """Random codes should rarely repeat."""
        generator = ShortCodeGenerator(default_length=8)
        codes = {generator.generate_random() for _ in range(1000)}

        assert len(codes) > 990

    def test_alphabet(self):
        """The alphabet has 62 distinct symbols."""
        assert len(set(ShortCodeGenerator.BASE62_CHARS)) == 62
        assert BASE62_PATTERN.match(ShortCodeGenerator.BASE62_CHARS)
