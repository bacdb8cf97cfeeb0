import unittest

from command_prompter.args import ArgumentSpec, default_registry
from command_prompter.collectors import SingleValueCollector, obtain
from command_prompter.core.models import CancelReason

from fakes import ScriptedChannel, make_context


class SingleValueCollectorTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.registry = default_registry()
        self.spec = ArgumentSpec.create(
            self.registry,
            key="count",
            label="number of items",
            prompt="How many items?",
            type="integer",
            max=100,
        )

    async def _collect(self, spec, replies, value=None, prompt_limit=None):
        channel = ScriptedChannel(replies)
        result = await SingleValueCollector(spec).collect(make_context(channel), value, prompt_limit)
        return channel, result

    async def test_default_short_circuits(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="nick", prompt="Nickname?", type="string", default="clear")
        channel, result = await self._collect(spec, ["ignored"])
        self.assertEqual(result.value, "clear")
        self.assertIs(result.cancelled, CancelReason.NONE)
        self.assertEqual(result.prompts, ())
        self.assertEqual(result.answers, ())
        self.assertEqual(channel.sent, [])
        self.assertEqual(channel.waits, [])

    async def test_valid_supplied_value_needs_no_prompt(self) -> None:
        channel, result = await self._collect(self.spec, [], value="42")
        self.assertEqual(result.value, 42)
        self.assertTrue(result.ok)
        self.assertEqual(channel.sent, [])

    async def test_supplied_value_beats_default(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer", default=1)
        _, result = await self._collect(spec, [], value="7")
        self.assertEqual(result.value, 7)

    async def test_missing_value_prompts_with_declared_text(self) -> None:
        channel, result = await self._collect(self.spec, ["12"])
        self.assertEqual(result.value, 12)
        self.assertEqual(len(result.prompts), 1)
        self.assertEqual([a.content for a in result.answers], ["12"])
        self.assertEqual(
            channel.sent[0],
            "**How many items?**\n"
            "Respond with `cancel` to cancel the command. "
            "The command will automatically be cancelled in 30 seconds.",
        )
        self.assertEqual(channel.waits, [("user-1", 30.0)])

    async def test_invalid_value_uses_generic_message(self) -> None:
        channel, result = await self._collect(self.spec, ["5"], value="lots")
        self.assertEqual(result.value, 5)
        self.assertTrue(channel.sent[0].startswith("You provided an invalid **number of items**! Please try again!\n"))

    async def test_empty_reply_gets_generic_message(self) -> None:
        channel, result = await self._collect(self.spec, ["", "8"])
        self.assertEqual(result.value, 8)
        self.assertEqual(len(channel.sent), 2)
        self.assertTrue(channel.sent[0].startswith("**How many items?**\n"))
        self.assertTrue(channel.sent[1].startswith("You provided an invalid **number of items**! Please try again!\n"))

    async def test_empty_supplied_value_asks_with_declared_text(self) -> None:
        channel, result = await self._collect(self.spec, ["3"], value="")
        self.assertEqual(result.value, 3)
        self.assertTrue(channel.sent[0].startswith("**How many items?**\n"))

    async def test_rejection_reason_replaces_generic_message(self) -> None:
        channel, result = await self._collect(self.spec, ["500", "50"])
        self.assertEqual(result.value, 50)
        self.assertEqual(len(channel.sent), 2)
        self.assertTrue(channel.sent[1].startswith("Please enter a number below or exactly 100.\n"))

    async def test_cancel_is_trimmed_and_case_insensitive(self) -> None:
        _, result = await self._collect(self.spec, ["  CanCel  "])
        self.assertIsNone(result.value)
        self.assertIs(result.cancelled, CancelReason.USER)
        self.assertEqual(len(result.prompts), 1)
        self.assertEqual(len(result.answers), 1)

    async def test_timeout(self) -> None:
        _, result = await self._collect(self.spec, ["nope", None])
        self.assertIsNone(result.value)
        self.assertIs(result.cancelled, CancelReason.TIMEOUT)
        self.assertEqual(len(result.prompts), 2)
        self.assertEqual([a.content for a in result.answers], ["nope"])

    async def test_prompt_limit_counts_prompts_sent(self) -> None:
        _, result = await self._collect(self.spec, ["a", "b", "c", "4"], prompt_limit=3)
        self.assertIs(result.cancelled, CancelReason.PROMPT_LIMIT)
        self.assertIsNone(result.value)
        self.assertEqual(len(result.prompts), 3)
        self.assertEqual(len(result.answers), 3)

    async def test_zero_prompt_limit_never_prompts(self) -> None:
        channel, result = await self._collect(self.spec, ["4"], prompt_limit=0)
        self.assertIs(result.cancelled, CancelReason.PROMPT_LIMIT)
        self.assertEqual(channel.sent, [])

    async def test_unbounded_wait_has_no_deadline_note(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer", wait=0)
        channel, result = await self._collect(spec, ["3"])
        self.assertEqual(result.value, 3)
        self.assertEqual(channel.sent[0], "**N?**\nRespond with `cancel` to cancel the command.")
        self.assertEqual(channel.waits, [("user-1", None)])

    async def test_parser_runs_once_on_final_value(self) -> None:
        parsed = []

        def parse(raw, context, spec):
            parsed.append(raw)
            return raw.upper()

        spec = ArgumentSpec.create(
            self.registry, key="word", prompt="Word?", validate=lambda raw, c, s: raw.isalpha(), parse=parse
        )
        _, result = await self._collect(spec, ["abc"], value="123")
        self.assertEqual(result.value, "ABC")
        self.assertEqual(parsed, ["abc"])


class ObtainDispatchTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.registry = default_registry()

    async def test_routes_infinite_specs(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="ns", prompt="Numbers?", type="integer", infinite=True)
        result = await obtain(spec, make_context(ScriptedChannel()), ["1", "2"])
        self.assertEqual(result.value, (1, 2))

    async def test_single_string_for_infinite_spec(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="ns", prompt="Numbers?", type="integer", infinite=True)
        result = await obtain(spec, make_context(ScriptedChannel()), "9")
        self.assertEqual(result.value, (9,))

    async def test_sequence_for_single_spec_is_rejected(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer")
        with self.assertRaises(TypeError):
            await obtain(spec, make_context(ScriptedChannel()), ["1"])

    async def test_negative_prompt_limit_is_rejected(self) -> None:
        spec = ArgumentSpec.create(self.registry, key="n", prompt="N?", type="integer")
        with self.assertRaises(ValueError):
            await obtain(spec, make_context(ScriptedChannel()), "1", prompt_limit=-1)

    async def test_blank_input_gives_infinite_default(self) -> None:
        spec = ArgumentSpec.create(
            self.registry, key="tags", prompt="Tags?", type="string", infinite=True, default=("misc",)
        )
        for supplied in ("", [""], ["", ""]):
            with self.subTest(supplied=supplied):
                channel = ScriptedChannel(["ignored"])
                result = await obtain(spec, make_context(channel), supplied)
                self.assertEqual(result.value, ("misc",))
                self.assertIs(result.cancelled, CancelReason.NONE)
                self.assertEqual(result.prompts, ())
                self.assertEqual(channel.sent, [])
                self.assertEqual(channel.waits, [])

    async def test_parser_returning_none_is_an_error(self) -> None:
        spec = ArgumentSpec.create(
            self.registry, key="x", prompt="X?", validate=lambda raw, c, s: True, parse=lambda raw, c, s: None
        )
        with self.assertRaises(ValueError):
            await obtain(spec, make_context(ScriptedChannel()), "x")


if __name__ == "__main__":
    unittest.main()
