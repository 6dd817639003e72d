from __future__ import annotations

from hubstate.state.identity import IdentityResolver


def test_web_ids_pass_through() -> None:
    resolver = IdentityResolver()
    assert resolver.resolve("web-guest-1") == "web-guest-1"
    assert resolver.resolve("web-guest-1") == "web-guest-1"
    assert resolver.mappings() == {}


def test_voice_ids_get_stable_sequential_handles() -> None:
    resolver = IdentityResolver()

    first = resolver.resolve("amzn1.ask.account.AAA")
    second = resolver.resolve("amzn1.ask.account.BBB")

    assert first == "alexa-user-1"
    assert second == "alexa-user-2"
    assert resolver.resolve("amzn1.ask.account.AAA") == first
    assert len(resolver) == 2


def test_resolvers_are_isolated() -> None:
    one = IdentityResolver()
    two = IdentityResolver()
    one.resolve("amzn1.ask.account.AAA")

    assert two.resolve("amzn1.ask.account.ZZZ") == "alexa-user-1"


def test_custom_prefixes() -> None:
    resolver = IdentityResolver(voice_id_prefix="voice:", handle_prefix="v-")
    assert resolver.resolve("voice:abc") == "v-1"
    assert resolver.resolve("amzn1.ask.account.AAA") == "amzn1.ask.account.AAA"
    assert resolver.is_voice_handle("v-1")
    assert not resolver.is_voice_caller("web-guest-1")
