import dataclasses
import unittest

from command_prompter.args import ArgumentSpec, ArgumentSpecError, UnknownTypeError, default_registry
from command_prompter.core.models import ValidationResult

from fakes import ScriptedChannel, make_context


def _hashtag_validator(raw, context, spec):
    return raw.startswith("#") or "Tags must start with #."


def _hashtag_parser(raw, context, spec):
    return raw[1:]


class ArgumentSpecConstructionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = default_registry()

    def test_label_defaults_to_key(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="count", prompt="How many?", type="integer")
        self.assertEqual(spec.label, "count")
        self.assertTrue(spec.required)
        self.assertFalse(spec.infinite)
        self.assertEqual(spec.wait, 30)

    def test_spec_is_immutable(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="count", prompt="How many?", type="integer")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            spec.prompt = "changed"  # type: ignore[misc]

    def test_unknown_type_id(self) -> None:
        with self.assertRaises(UnknownTypeError) as caught:
            ArgumentSpec.create(self.registry, key="who", prompt="Who?", type="member")
        self.assertIsInstance(caught.exception, LookupError)
        self.assertEqual(caught.exception.type_id, "member")

    def test_needs_type_or_validator_and_parser(self) -> None:
        with self.assertRaises(ArgumentSpecError):
            ArgumentSpec.create(self.registry, key="tag", prompt="Tag?")
        with self.assertRaises(ArgumentSpecError):
            ArgumentSpec.create(self.registry, key="tag", prompt="Tag?", validate=_hashtag_validator)
        spec = ArgumentSpec.create(
            self.registry, key="tag", prompt="Tag?", validate=_hashtag_validator, parse=_hashtag_parser
        )
        self.assertIsNone(spec.type)

    def test_missing_key_or_prompt(self) -> None:
        with self.assertRaises(ArgumentSpecError):
            ArgumentSpec.create(self.registry, key="", prompt="Tag?", type="string")
        with self.assertRaises(ArgumentSpecError):
            ArgumentSpec.create(self.registry, key="tag", prompt="", type="string")
        with self.assertRaises(TypeError):
            ArgumentSpec.create(self.registry, key=None, prompt="Tag?", type="string")  # type: ignore[arg-type]

    def test_wrong_field_types(self) -> None:
        cases = [
            {"label": 5},
            {"validate": "not callable"},
            {"parse": 3},
            {"wait": "30"},
            {"wait": float("nan")},
            {"min": "1"},
            {"infinite": "yes"},
        ]
        for extra in cases:
            with self.subTest(extra=extra):
                with self.assertRaises(TypeError):
                    ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer", **extra)

    def test_wait_timeout(self) -> None:
        make = lambda wait: ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer", wait=wait)
        self.assertEqual(make(45).wait_timeout, 45.0)
        self.assertIsNone(make(0).wait_timeout)
        self.assertIsNone(make(float("inf")).wait_timeout)


class ArgumentSpecValidationTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.registry = default_registry()
        self.context = make_context(ScriptedChannel())

    async def test_custom_pair_is_used(self) -> None:
        spec = ArgumentSpec.create(
            self.registry, key="tag", prompt="Tag?", validate=_hashtag_validator, parse=_hashtag_parser
        )
        self.assertEqual(await spec.validate("#python", self.context), ValidationResult.accept())
        self.assertEqual(await spec.validate("python", self.context), ValidationResult.reject("Tags must start with #."))
        self.assertEqual(await spec.parse("#python", self.context), "python")

    async def test_async_validator_and_parser(self) -> None:
        async def validate(raw, context, spec):
            return raw == context.author_id

        async def parse(raw, context, spec):
            return {"id": raw}

        spec = ArgumentSpec.create(self.registry, key="me", prompt="Who?", validate=validate, parse=parse)
        self.assertTrue((await spec.validate("user-1", self.context)).accepted)
        self.assertFalse((await spec.validate("user-2", self.context)).accepted)
        self.assertEqual(await spec.parse("user-1", self.context), {"id": "user-1"})

    async def test_custom_validator_overrides_type_half(self) -> None:
        spec = ArgumentSpec.create(
            self.registry,
            key="even",
            prompt="Even number?",
            type="integer",
            validate=lambda raw, context, spec: raw.isdigit() and int(raw) % 2 == 0,
        )
        self.assertFalse((await spec.validate("3", self.context)).accepted)
        self.assertTrue((await spec.validate("4", self.context)).accepted)
        self.assertEqual(await spec.parse("4", self.context), 4)

    async def test_parser_must_not_return_none(self) -> None:
        spec = ArgumentSpec.create(
            self.registry, key="gone", prompt="Gone?", validate=lambda raw, c, s: True, parse=lambda raw, c, s: None
        )
        with self.assertRaises(ValueError):
            await spec.parse("anything", self.context)

    async def test_validator_exceptions_propagate(self) -> None:
        def explode(raw, context, spec):
            raise RuntimeError("boom")

        spec = ArgumentSpec.create(self.registry, key="x", prompt="X?", validate=explode, parse=_hashtag_parser)
        with self.assertRaises(RuntimeError):
            await spec.validate("x", self.context)


if __name__ == "__main__":
    unittest.main()
