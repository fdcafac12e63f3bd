"""
Parser behavioral tests (token rules, value binding, param distribution, faults).

Scope
- Validate option spellings: separate and inline values, short groups, "--".
- Validate optional values, repeatable options and required options.
- Validate positional distribution over mandatory, optional and multi-value params.
- Validate the faults raised for malformed input and their context.

Conventions
- Test method names follow CamelCase per project convention.
- argv[0] is always a program name and never bound.
"""

from __future__ import annotations

import io
import sys
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argosy import (
    Args,
    Param,
    arg,
    FaultCode,
    InvalidArgumentError,
    MissingArgumentError,
    UnknownOptionError,
    ExtraValueError,
    DuplicateOptionError,
    ExtraParamError,
    MissingOptionError,
    MissingValueError,
    MissingParamError,
    EmptyValueWarning,
)


class TestOptions(TestCase):
    """Behavioral tests for option tokens."""

    def setUp(self):
        self.args = Args(
            arg("-a", "--addr", "IP", "address to bind"),
            arg("-p", "--port", "N", "port to listen on"),
            arg("-h", "--help", "show this help"),
            arg("-v", "verbose"),
            arg("-q", "quiet"),
        )

    def testSeparateValueAndFlag(self):
        bindings = self.args.parse(["prog", "-p", "8080", "-h"])
        self.assertEqual(bindings["-p"].value(), "8080")
        self.assertEqual(bindings["--port"].value(), "8080")
        self.assertTrue(bindings["--help"].is_present())
        self.assertEqual(bindings["-h"].value(), "")
        self.assertTrue(bindings["--addr"].empty())

    def testInlineValues(self):
        bindings = self.args.parse(["prog", "--port=8080", "-a127.0.0.1"])
        self.assertEqual(bindings["--port"].value(), "8080")
        self.assertEqual(bindings["--addr"].value(), "127.0.0.1")

    def testLongValueKeepsLaterEquals(self):
        bindings = self.args.parse(["prog", "--addr=a=b"])
        self.assertEqual(bindings["--addr"].value(), "a=b")

    def testRequiredValueTakesOptionLookingToken(self):
        bindings = self.args.parse(["prog", "--addr", "-v"])
        self.assertEqual(bindings["--addr"].value(), "-v")
        self.assertFalse(bindings["-v"].is_present())

    def testGroupingEquivalence(self):
        grouped = self.args.parse(["prog", "-vqh"])
        separate = self.args.parse(["prog", "-v", "-q", "-h"])
        for name in ("-v", "-q", "-h", "-p", "-a"):
            self.assertEqual(grouped[name].values(), separate[name].values(), name)

    def testGroupEndsWithValueOption(self):
        bindings = self.args.parse(["prog", "-vqp8080"])
        self.assertTrue(bindings["-v"].is_present())
        self.assertTrue(bindings["-q"].is_present())
        self.assertEqual(bindings["-p"].value(), "8080")

    def testGroupWithUnknownMember(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.args.parse(["prog", "-vz"])
        self.assertEqual(context.exception.token, "-z")
        self.assertEqual(context.exception.options["index"], 1)

    def testRepeatedOptionWithoutSpecifier(self):
        with self.assertRaises(DuplicateOptionError) as context:
            self.args.parse(["prog", "-p", "1", "--port", "2"])
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION_USE)
        self.assertEqual(context.exception.options["index"], 3)

    def testRepeatedFlagInsideGroup(self):
        with self.assertRaises(DuplicateOptionError):
            self.args.parse(["prog", "-vv"])

    def testUnknownOptionSuggestsCloseName(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.args.parse(["/usr/bin/prog", "--prot", "8080"])
        fault = context.exception
        self.assertIsInstance(fault, InvalidArgumentError)
        self.assertEqual(fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.token, "--prot")
        self.assertIn("--port", fault.options["suggestions"])
        self.assertIn("--port", fault.hint)
        self.assertEqual(fault.options["prog"], "prog")

    def testFlagRejectsInlineValue(self):
        with self.assertRaises(ExtraValueError) as context:
            self.args.parse(["prog", "--help=yes"])
        self.assertEqual(context.exception.code, FaultCode.EXTRA_VALUE)
        self.assertEqual(context.exception.token, "--help=yes")

    def testMissingValueAtEnd(self):
        with self.assertRaises(MissingValueError) as context:
            self.args.parse(["prog", "-p"])
        self.assertIsInstance(context.exception, MissingArgumentError)
        self.assertEqual(context.exception.code, FaultCode.MISSING_VALUE)
        self.assertIs(context.exception.argument, self.args.lookup("--port"))

    def testMissingValueBeforeTerminator(self):
        with self.assertRaises(MissingValueError):
            self.args.parse(["prog", "--port", "--", "8080"])

    def testEmptyInlineValueWarns(self):
        with self.assertWarns(EmptyValueWarning):
            bindings = self.args.parse(["prog", "--addr="])
        self.assertTrue(bindings["--addr"].is_present())
        self.assertEqual(bindings["--addr"].value(), "")

    def testUnknownOptionWithoutNeighbours(self):
        with self.assertRaises(UnknownOptionError) as context:
            Args().parse(["prog", "-x"])
        self.assertEqual(context.exception.options["suggestions"], [])


class TestOptionSpecifiers(TestCase):
    """Behavioral tests for repeatable, required and optional-value options."""

    def testRepeatableFlagCountsOccurrences(self):
        args = Args(arg("-v", "+", "more verbose"))
        bindings = args.parse(["prog", "-vvv", "-v"])
        self.assertEqual(bindings["-v"].count(), 4)

    def testRepeatableValueOption(self):
        args = Args(arg("-I", "--include", "DIR+", "include directory"))
        bindings = args.parse(["prog", "-I", "a", "--include=b", "-Ic"])
        self.assertEqual(bindings["-I"].values(), ("a", "b", "c"))
        self.assertEqual(bindings["-I"].value(1), "b")

    def testRequiredOptionMissing(self):
        args = Args(arg("-p", "--port", "N!", "port"))
        with self.assertRaises(MissingOptionError) as context:
            args.parse(["prog"])
        self.assertEqual(context.exception.code, FaultCode.MISSING_OPTION)
        self.assertIn("-p/--port", context.exception.message)

    def testRequiredOptionPresent(self):
        args = Args(arg("-p", "--port", "N!", "port"), arg("-h", "--help", "help"))
        bindings = args.parse(["prog", "-p", "8080", "-h"])
        self.assertEqual(bindings["--port"].value(), "8080")
        self.assertEqual(bindings["--help"].count(), 1)

    def testOptionalValueWithoutValue(self):
        args = Args(arg("--chmod", "MODE?", "change mode"))
        bindings = args.parse(["prog", "--chmod"])
        self.assertTrue(bindings["--chmod"].is_present())
        self.assertEqual(bindings["--chmod"].value(), "")
        self.assertEqual(bindings["--chmod"].value_or("0644"), "")

    def testOptionalValueAbsent(self):
        args = Args(arg("--chmod", "MODE?", "change mode"))
        bindings = args.parse(["prog"])
        self.assertFalse(bindings["--chmod"].is_present())
        self.assertEqual(bindings["--chmod"].value_or("0644"), "0644")

    def testOptionalValueInlineAndSeparate(self):
        args = Args(arg("--chmod", "MODE?", "change mode"), arg("-n", "dry run"))
        self.assertEqual(args.parse(["prog", "--chmod=0755"])["--chmod"].value(), "0755")
        self.assertEqual(args.parse(["prog", "--chmod", "0755"])["--chmod"].value(), "0755")

    def testOptionalValueSkipsOptionLookingToken(self):
        args = Args(arg("--chmod", "MODE?", "change mode"), arg("-n", "dry run"))
        bindings = args.parse(["prog", "--chmod", "-n"])
        self.assertEqual(bindings["--chmod"].value(), "")
        self.assertTrue(bindings["-n"].is_present())


class TestParams(TestCase):
    """Behavioral tests for positional distribution."""

    def testTerminatorMakesOptionsPositional(self):
        args = Args(arg("-y", "flag"), arg("ARG+", "arguments"))
        bindings = args.parse(["prog", "--", "-x"])
        self.assertEqual(bindings["ARG"].values(), ("-x",))
        self.assertFalse(bindings["-y"].is_present())

    def testSecondTerminatorIsPositional(self):
        args = Args(arg("A", "a"), arg("B", "b"))
        bindings = args.parse(["prog", "--", "--", "x"])
        self.assertEqual(bindings["A"].value(), "--")
        self.assertEqual(bindings["B"].value(), "x")

    def testEmptyAndDashArePositional(self):
        args = Args(arg("A", "a"), arg("B", "b"))
        bindings = args.parse(["prog", "", "-"])
        self.assertEqual(bindings["A"].value(), "")
        self.assertEqual(bindings["B"].value(), "-")

    def testOptionsAndParamsInterleave(self):
        args = Args(arg("-v", "verbose"), arg("SRC+", "sources"), arg("DEST", "destination"))
        bindings = args.parse(["prog", "a", "-v", "b", "c"])
        self.assertEqual(bindings["SRC"].values(), ("a", "b"))
        self.assertEqual(bindings["DEST"].value(), "c")
        self.assertTrue(bindings["-v"].is_present())

    def testRepeatableParamAccumulates(self):
        args = Args(arg("FILE+", "files"))
        self.assertEqual(args.parse(["prog", "a", "b", "c"])["FILE"].values(), ("a", "b", "c"))

    def testMandatoryRepeatableNeedsOneValue(self):
        args = Args(arg("FILE+", "files"))
        with self.assertRaises(MissingParamError) as context:
            args.parse(["prog"])
        self.assertEqual(context.exception.code, FaultCode.MISSING_PARAM)
        self.assertEqual(context.exception.token, "FILE")

    def testOptionalRepeatableMayBeEmpty(self):
        args = Args(arg("FILE?+", "files"))
        self.assertTrue(args.parse(["prog"])["FILE"].empty())

    def testExtraParam(self):
        args = Args(arg("FILE", "file"))
        with self.assertRaises(ExtraParamError) as context:
            args.parse(["prog", "a", "b"])
        fault = context.exception
        self.assertEqual(fault.code, FaultCode.EXTRA_PARAM)
        self.assertEqual(fault.token, "b")
        self.assertEqual(fault.options["index"], 2)
        self.assertIn("second position", fault.message)

    def testNoParamsDefined(self):
        with self.assertRaises(ExtraParamError):
            Args().parse(["prog", "stray"])


class TestInterleavedParams(TestCase):
    """Positional completeness with optional params between mandatory ones."""

    def setUp(self):
        self.args = Args(
            arg("p1", ""),
            arg("p2?", ""),
            arg("p3", ""),
            arg("p4?", ""),
            arg("p5", ""),
            strict=False,
        )

    def check(self, argv, expected):
        bindings = self.args.parse(["pgm", *argv])
        for name in ("p1", "p2", "p3", "p4", "p5"):
            self.assertEqual(bindings[name].values(), expected.get(name, ()), name)

    def testNotEnough(self):
        for argv in ([], ["p1"], ["p1", "p3"]):
            with self.assertRaises(MissingArgumentError):
                self.args.parse(["pgm", *argv])

    def testMandatoryOnly(self):
        self.check(["p1", "p3", "p5"], {"p1": ("p1",), "p3": ("p3",), "p5": ("p5",)})

    def testFirstOptionalFilledFirst(self):
        self.check(
            ["p1", "p2", "p3", "p5"],
            {"p1": ("p1",), "p2": ("p2",), "p3": ("p3",), "p5": ("p5",)},
        )

    def testAll(self):
        self.check(
            ["p1", "p2", "p3", "p4", "p5"],
            {name: (name,) for name in ("p1", "p2", "p3", "p4", "p5")},
        )


class TestInterleavedRepeatableParam(TestCase):
    """Positional completeness with a leading optional multi-value param."""

    def setUp(self):
        self.args = Args(
            Param("p1", optional=True, repeatable=True),
            arg("p2", ""),
            arg("p3?", ""),
            arg("p4", ""),
            arg("p5?", ""),
            strict=False,
        )

    def testNotEnough(self):
        for argv in ([], ["p2"]):
            with self.assertRaises(MissingParamError):
                self.args.parse(["pgm", *argv])

    def testMandatoryOnly(self):
        bindings = self.args.parse(["pgm", "p2", "p4"])
        self.assertTrue(bindings["p1"].empty())
        self.assertEqual(bindings["p2"].value(), "p2")
        self.assertTrue(bindings["p3"].empty())
        self.assertEqual(bindings["p4"].value(), "p4")
        self.assertTrue(bindings["p5"].empty())

    def testOneOptional(self):
        bindings = self.args.parse(["pgm", "p1", "p2", "p4"])
        self.assertEqual(bindings["p1"].values(), ("p1",))
        self.assertTrue(bindings["p3"].empty())
        self.assertEqual(bindings["p4"].value(), "p4")

    def testTwoOptionals(self):
        bindings = self.args.parse(["pgm", "p1", "p2", "p3", "p4"])
        self.assertEqual(bindings["p1"].value(), "p1")
        self.assertEqual(bindings["p3"].value(), "p3")
        self.assertTrue(bindings["p5"].empty())

    def testMultiValueKeepsLaterOptionalsFilled(self):
        bindings = self.args.parse(["pgm", "p1.0", "p1.1", "p2", "p3", "p4", "p5"])
        self.assertEqual(bindings["p1"].count(), 2)
        self.assertEqual(bindings["p1"].values(), ("p1.0", "p1.1"))
        for name in ("p2", "p3", "p4", "p5"):
            self.assertEqual(bindings[name].value(), name)

    def testMultiValueTakesSurplus(self):
        bindings = self.args.parse(["pgm", "p1.0", "p1.1", "p1.2", "p1.3", "p2", "p3", "p4", "p5"])
        self.assertEqual(bindings["p1"].values(), ("p1.0", "p1.1", "p1.2", "p1.3"))
        for name in ("p2", "p3", "p4", "p5"):
            self.assertEqual(bindings[name].value(), name)


class TestParseCalls(TestCase):
    """Behavioral tests for the parse() entry point itself."""

    def setUp(self):
        self.args = Args(arg("-v", "+", "verbose"), arg("FILE?", "file"))

    def testDefaultsToSysArgv(self):
        with mock.patch.object(sys, "argv", ["prog", "-v", "data.txt"]):
            bindings = self.args.parse()
        self.assertEqual(bindings["FILE"].value(), "data.txt")

    def testEmptyArgv(self):
        bindings = self.args.parse([])
        self.assertTrue(bindings["-v"].empty())

    def testRejectsPlainString(self):
        with self.assertRaises(TypeError):
            self.args.parse("prog -v")

    def testRejectsNonStringTokens(self):
        with self.assertRaises(TypeError):
            self.args.parse(["prog", 1])

    def testAcceptsAnyIterable(self):
        bindings = self.args.parse(iter(["prog", "-v"]))
        self.assertEqual(bindings["-v"].count(), 1)

    def testRepeatedParsesDoNotAccumulate(self):
        first = self.args.parse(["prog", "-vv", "a"])
        second = self.args.parse(["prog", "-v"])
        self.assertEqual(first["-v"].count(), 2)
        self.assertEqual(second["-v"].count(), 1)
        self.assertTrue(second["FILE"].empty())
        self.assertEqual(first["FILE"].value(), "a")

    def testLookupIsIdempotent(self):
        bindings = self.args.parse(["prog", "-v", "a"])
        self.assertEqual(bindings["-v"], bindings["-v"])
        self.assertEqual(bindings.lookup("FILE").values(), bindings["FILE"].values())


class TestFaultReporting(TestCase):
    """Host control over how parse() surfaces faults."""

    def setUp(self):
        self.args = Args(arg("-a", "--addr", "ADDR", "address"), arg("FILE?", "file"))

    def testEmptyValueWarningCanBeSilenced(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            bindings = self.args.parse(["prog", "--addr="], warn=False)
        self.assertEqual(caught, [])
        self.assertTrue(bindings["--addr"].is_present())
        self.assertEqual(bindings["--addr"].value(), "")

    def testEmptyValueWarningAsError(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with self.assertRaises(EmptyValueWarning):
                self.args.parse(["prog", "--addr="])
            bindings = self.args.parse(["prog", "--addr="], warn=False)
        self.assertEqual(bindings["--addr"].value(), "")

    def testShellWarningPrintsInsteadOfWarning(self):
        buffer = io.StringIO()
        with mock.patch("argosy.faults.console", Console(file=buffer, width=120)):
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                bindings = self.args.parse(["prog", "--addr=", "a"], shell=True, colorful=False)
        self.assertEqual(caught, [])
        self.assertIn("empty inline value", buffer.getvalue())
        self.assertEqual(bindings["FILE"].value(), "a")

    def testShellErrorExits(self):
        buffer = io.StringIO()
        with mock.patch("argosy.faults.console", Console(file=buffer, width=120)):
            with self.assertRaises(SystemExit) as context:
                self.args.parse(["prog", "--port"], shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("--port", buffer.getvalue())

    def testErrorsRaiseByDefault(self):
        with self.assertRaises(UnknownOptionError):
            self.args.parse(["prog", "--port"])


if __name__ == "__main__":
    unittest.main()
