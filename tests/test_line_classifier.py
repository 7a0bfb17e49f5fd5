#!/usr/bin/env python3
"""
Tests for the line classifier.
"""

import unittest
from dataclasses import replace

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from budget_parser.line_classifier import LineClassifier
from budget_parser.rules import DEFAULT_RULES


class TestLineClassifier(unittest.TestCase):
    """Test cases for LineClassifier."""

    def setUp(self):
        """Set up test fixtures."""
        self.classifier = LineClassifier()

    def test_short_lines_are_skipped(self):
        """Lines under four characters after marker stripping are noise."""
        for line in ["Giz", "", "   ", "- ab", "• 1) Lá", "*** x", "a) ok"]:
            with self.subTest(line=line):
                self.assertTrue(self.classifier.classify(line).skip)

    def test_four_characters_is_enough(self):
        result = self.classifier.classify("Cola")
        self.assertFalse(result.skip)
        self.assertEqual(result.text, "Cola")

    def test_header_terms_are_skipped(self):
        """Any denylisted term rejects the line regardless of other content."""
        lines = [
            "TOTAL: R$ 150,00",
            "Lista de Material Escolar 2025",
            "ENSINO FUNDAMENTAL - 5º ANO",
            "Atenção: todo material deve vir identificado",
            "2 unid Caderno - obrigatório",
            "Valor total do orçamento",
        ]
        for line in lines:
            with self.subTest(line=line):
                result = self.classifier.classify(line)
                self.assertTrue(result.skip)
                self.assertIn("header term", result.reason)

    def test_item_wording_near_header_terms_is_kept(self):
        lines = [
            "2 Cola escolar 90g",
            "1 Tesoura sem ponta escolar",
            "Lápis escolar nº 2",
            "1 Caderno de caligrafia para aluno",
        ]
        for line in lines:
            with self.subTest(line=line):
                result = self.classifier.classify(line)
                self.assertFalse(result.skip, result.reason)

    def test_school_and_student_headers_are_skipped(self):
        for line in ["ESCOLA MUNICIPAL JOÃO XXIII", "Nome do aluno: ______", "Colégio Santa Maria"]:
            with self.subTest(line=line):
                self.assertTrue(self.classifier.classify(line).skip)

    def test_page_separator_is_skipped(self):
        result = self.classifier.classify("-- 1 of 2 --")
        self.assertTrue(result.skip)
        self.assertEqual(result.reason, "page separator")

    def test_list_markers_are_stripped(self):
        test_cases = [
            ("- 2 unid Caderno", "2 unid Caderno"),
            ("• Caneta azul", "Caneta azul"),
            ("* * Borracha", "Borracha"),
            ("1) Caneta azul", "Caneta azul"),
            ("(3) Tesoura sem ponta", "Tesoura sem ponta"),
            ("b) Régua 30 cm", "Régua 30 cm"),
            ("  ✔ Mochila  ", "Mochila"),
        ]
        for line, expected in test_cases:
            with self.subTest(line=line):
                result = self.classifier.classify(line)
                self.assertFalse(result.skip)
                self.assertEqual(result.text, expected)

    def test_leading_quantity_is_not_a_marker(self):
        self.assertEqual(self.classifier.strip_markers("02 Lápis"), "02 Lápis")
        self.assertEqual(self.classifier.strip_markers("| Caderno"), "| Caderno")

    def test_item_lines_are_candidates(self):
        for line in ["2 unid Caderno", "96 fls Caderno Espiral", "3x Caneta Azul", "Xilofone"]:
            with self.subTest(line=line):
                self.assertFalse(self.classifier.is_noise(line))

    def test_denylist_is_configurable(self):
        rules = replace(DEFAULT_RULES, header_denylist=frozenset({"xyz"}))
        classifier = LineClassifier(rules)

        self.assertTrue(classifier.classify("Caneta XYZ").skip)
        self.assertFalse(classifier.classify("Total de canetas").skip)

    def test_min_length_is_configurable(self):
        rules = replace(DEFAULT_RULES, min_line_length=2)
        self.assertFalse(LineClassifier(rules).classify("Giz").skip)

    def test_classification_is_deterministic(self):
        line = "• 2 unid Caderno"
        self.assertEqual(self.classifier.classify(line), self.classifier.classify(line))


if __name__ == "__main__":
    unittest.main()
