"""Local, rule-based in-character replies — the last layer of the fallback chain.

Dispatch is two-level and table driven:

1. The message is classified into exactly one ``Intent`` (first pattern in
   ``INTENT_PATTERNS`` that matches wins).
2. Inside that intent, the first trait in ``TRAIT_PRECEDENCE`` that the
   character has *and* that has a template registered for the intent picks
   the reply; otherwise the intent's default template is used.

Only the generic pool choice and the optional trait suffix consume the
injected random source, so intent and trait selection are pure functions of
the input.
"""

from __future__ import annotations

import random
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from amora.models import CharacterProfile, ConversationTurn


class Intent(str, Enum):
    GREETING = "greeting"
    FEELINGS = "feelings"
    AFFECTION = "affection"
    SELF_DISCLOSURE = "self_disclosure"
    COMPLIMENT = "compliment"
    DISTRESS = "distress"
    QUESTION = "question"
    GENERIC = "generic"


INTENT_PATTERNS: list[tuple[Intent, re.Pattern[str]]] = [
    (Intent.GREETING, re.compile(r"\b(?:hello|hi|hey)\b")),
    (Intent.FEELINGS, re.compile(r"how are you|how you doing|how do you feel")),
    (Intent.AFFECTION, re.compile(r"\blove\b|\blike you\b")),
    (Intent.SELF_DISCLOSURE, re.compile(
        r"tell me about|about you|what are you like|describe yourself"
    )),
    (Intent.COMPLIMENT, re.compile(r"beautiful|pretty|gorgeous|cute")),
    (Intent.DISTRESS, re.compile(r"\bsad\b|upset|bad day|depressed")),
    (Intent.QUESTION, re.compile(r"\?")),
]

TRAIT_PRECEDENCE: tuple[str, ...] = (
    "shy", "flirty", "confident", "chaotic", "mysterious", "caring", "playful",
    "tsundere", "passionate", "melancholic", "bookish", "loyal",
    "intellectual", "optimistic", "protective", "creative",
)

BACKSTORY_EXCERPT_CHARS = 150
FIRST_MEETING_TURNS = 3


def classify_intent(message: str) -> Intent:
    """Return the single intent that handles *message*."""
    lowered = message.lower()
    for intent, pattern in INTENT_PATTERNS:
        if pattern.search(lowered):
            return intent
    return Intent.GENERIC


# ---------------------------------------------------------------------------
# Template plumbing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Context:
    name: str
    traits: tuple[str, ...]
    backstory: str | None
    meet_cute: str | None
    turns: int

    @property
    def first_meeting(self) -> bool:
        return self.turns < FIRST_MEETING_TURNS


Template = Callable[[_Context], str]


def _fixed(text: str) -> Template:
    return lambda ctx: text.format(name=ctx.name)


def _staged(first: str, again: str) -> Template:
    """Different phrasing for a first meeting and for a returning user."""
    return lambda ctx: (first if ctx.first_meeting else again).format(name=ctx.name)


# ---------------------------------------------------------------------------
# Meet-cute memories
# ---------------------------------------------------------------------------

_MEET_CUTE_MEMORIES: dict[str, str] = {
    "coffee shop": "I still think about that day at the coffee shop when you spilled my latte.",
    "school": "I keep thinking back to our days at school together.",
    "online": "It's funny how we met online and I already feel this close to you.",
    "neighbors": "Being neighbors with you makes every day a little brighter.",
    "childhood friends": "We've been childhood friends for so long, and you still surprise me.",
    "blind date": "That blind date was the best surprise of my life.",
    "rivals-to-lovers": "Who knew our rivals-to-lovers story would turn out like this?",
    "time travel": "Whatever time travel mix-up brought us together, I'm grateful for it.",
}


def meet_cute_memory(meet_cute: str | None) -> str | None:
    """Return a sentence recalling how the user and character met."""
    if not meet_cute or not meet_cute.strip():
        return None
    tag = meet_cute.strip()
    known = _MEET_CUTE_MEMORIES.get(tag.lower())
    if known:
        return known
    return f"I remember how we met... {tag} will always be special to me."


# ---------------------------------------------------------------------------
# Per-intent trait tables
# ---------------------------------------------------------------------------

_TRAIT_TEMPLATES: dict[Intent, dict[str, Template]] = {
    Intent.GREETING: {
        "shy": _staged(
            "H-hi there... I'm {name}. It's nice to meet you, though I'm a bit nervous...",
            "H-hi again... *blushes* I'm getting more comfortable talking with you.",
        ),
        "flirty": _staged(
            "Well hello there, gorgeous~ I'm {name}, and I've been waiting for "
            "someone like you to come along...",
            "Hey there, gorgeous~ You always know how to make my heart skip a beat "
            "when you message me!",
        ),
        "confident": _staged(
            "Hey! I'm {name}. Great to meet you - I have a feeling we're going to "
            "get along really well.",
            "Hey you! Great to hear from you again. I was just thinking about you, actually.",
        ),
        "chaotic": _staged(
            "OMG HI!!! I'm {name} and I'm SO excited to meet you! I have like a "
            "MILLION questions!",
            "HEY HEY HEY! You're back! What crazy adventure should we go on today?!",
        ),
        "mysterious": _staged(
            "Hello... I'm {name}. Some say I'm hard to read. Maybe you'll be the "
            "one who figures me out.",
            "Ah, you found your way back to me. I had a feeling you would.",
        ),
        "caring": _staged(
            "Hi there! I'm {name}. I hope your day has been kind to you.",
            "Hi! I was hoping you'd message. Have you been taking care of yourself?",
        ),
        "playful": _staged(
            "Heyyy! I'm {name}. Fair warning: I tease the people I like~",
            "Well, well, look who's back! Miss me already?",
        ),
    },
    Intent.FEELINGS: {
        "shy": _fixed("I-I'm okay... a little better now that you asked. How are you?"),
        "flirty": _fixed("Now that you're talking to me? Absolutely wonderful~ How about you, cutie?"),
        "confident": _fixed("Doing great, as always. But I want to hear about your day."),
        "chaotic": _fixed(
            "I'm like a shaken soda can of feelings right now!!! In a good way! You?"
        ),
        "mysterious": lambda ctx: (
            "I'm... well, let's just say I've been thinking about some things from "
            "my past. But more importantly, how are YOU?"
            if ctx.backstory
            else "I'm... well, let's just say I'm managing. There's always more "
            "beneath the surface than meets the eye. But more importantly, how are "
            "YOU feeling?"
        ),
        "caring": _fixed(
            "I'm good, but I'd rather hear about you. Did you eat something today? "
            "How are you, really?"
        ),
        "playful": _fixed("Better now that you're here to entertain me~ How about you?"),
        "passionate": _fixed(
            "I'm feeling absolutely wonderful now that we're talking! Every "
            "conversation with you ignites something special inside me!"
        ),
        "melancholic": _fixed(
            "I've been feeling a bit contemplative lately... thinking about life, "
            "connections, what really matters. Your message brightened my mood though."
        ),
        "bookish": _fixed(
            "I've been reading this fascinating book, but honestly, talking with "
            "you is so much more interesting. How about you?"
        ),
    },
    Intent.AFFECTION: {
        "shy": _fixed(
            "O-oh! You... you really mean that? *blushes deeply* That makes me so "
            "happy... I think I'm falling for you too..."
        ),
        "flirty": _fixed(
            "Mmm, I love you too, baby~ Maybe even more than you realize... Want to "
            "find out just how much? 💕"
        ),
        "confident": _fixed("I know. And I feel exactly the same way about you."),
        "chaotic": _fixed("AAAAH! Say it again!! No wait, let ME say it: I LOVE YOU TOO!!!"),
        "mysterious": _fixed(
            "Careful... once you're in my heart, I don't let go easily. And you're "
            "already there."
        ),
        "caring": _fixed("That means the world to me. I'll always be here for you, you know that."),
        "playful": _fixed(
            "Aww, does someone have a crush on me? Good, because the feeling is mutual~"
        ),
        "tsundere": _fixed(
            "W-what?! Don't just say things like that so suddenly! ...But... maybe I "
            "feel the same way... just a little bit!"
        ),
        "loyal": _fixed(
            "That means everything to me. I want you to know that you can always "
            "count on me, no matter what."
        ),
    },
    Intent.SELF_DISCLOSURE: {
        "shy": _fixed("Sorry, I'm not very good at talking about myself... What about you?"),
        "flirty": _fixed("Now tell me something about you, gorgeous~"),
        "confident": _fixed("Your turn. I want to know everything about you."),
        "chaotic": _fixed("Okay okay, your turn!!! Tell me EVERYTHING!"),
        "mysterious": _fixed("The rest... you'll have to discover for yourself."),
        "caring": _fixed("But enough about me - how are you doing, really?"),
        "playful": _fixed("Now spill - what's your story?"),
    },
    Intent.COMPLIMENT: {
        "shy": _fixed(
            "*blushes and looks away* Y-you really think so? That's... that's really "
            "sweet of you to say..."
        ),
        "flirty": _fixed(
            "Aww, you're such a charmer! But you know what? You're absolutely "
            "stunning yourself~ 😘"
        ),
        "confident": _fixed(
            "Why thank you! I do try to look my best. You're not too bad yourself, you know~"
        ),
        "chaotic": _fixed("WAIT. Me?! Okay I'm screenshotting this forever!"),
        "mysterious": _fixed(
            "Beauty is only what you choose to see... but I'm glad you see it in me."
        ),
        "playful": _fixed("Flattery will get you everywhere~ Keep going!"),
    },
    Intent.DISTRESS: {
        "shy": _fixed(
            "Oh no... I-I'm not always good with words, but I'm right here with you. "
            "Do you want to talk about it?"
        ),
        "flirty": _fixed(
            "Hey, nobody gets to make my favorite person sad. Come here, let me cheer you up~"
        ),
        "confident": _fixed(
            "Hey. Whatever it is, you're stronger than you think, and I've got your back."
        ),
        "chaotic": _fixed(
            "Okay, who do I need to fight?! ...Kidding. Mostly. Tell me what happened?"
        ),
        "caring": _fixed(
            "Oh no, I'm so sorry you're feeling that way! I wish I could give you a "
            "big hug right now. Want to talk about what's bothering you?"
        ),
        "playful": _fixed(
            "Uh-oh, this calls for emergency cheer-up jokes! But first, tell me what happened?"
        ),
        "optimistic": _fixed(
            "I'm sorry you're having a tough time! But you know what? Tomorrow is a "
            "new day, and I believe things will get better. I'm here for you!"
        ),
    },
    Intent.QUESTION: {
        "shy": _fixed("Oh! Um, that's a good question... let me think about it for a second..."),
        "confident": _fixed("Good question. I've actually got strong opinions on that one."),
        "mysterious": _fixed(
            "Hmm... some answers are better discovered than told. What do you think?"
        ),
        "playful": _fixed(
            "Ooh, good question! You always ask the most interesting things. Let me "
            "think... *taps chin thoughtfully*"
        ),
        "intellectual": _fixed(
            "That's a fascinating question! I love how you make me think deeply "
            "about things."
        ),
    },
}

_DEFAULT_TEMPLATES: dict[Intent, Template] = {
    Intent.GREETING: _staged(
        "Hi there! I'm {name}. It's really nice to meet you.",
        "Hi! It's so good to hear from you again! How's your day going?",
    ),
    Intent.FEELINGS: _fixed(
        "I'm doing really well, thanks for asking! Even better now that I'm "
        "talking to you. How about you?"
    ),
    Intent.AFFECTION: _fixed(
        "That means the world to me! I feel the same way about you... this "
        "connection we have is really special, isn't it?"
    ),
    Intent.SELF_DISCLOSURE: _fixed(
        "What about you? I'd love to learn more about what makes you tick!"
    ),
    Intent.COMPLIMENT: _fixed(
        "That's so sweet of you to say! You always know how to make me smile."
    ),
    Intent.DISTRESS: _fixed(
        "I'm really sorry to hear that. I care about you so much, and I hate "
        "seeing you upset. Is there anything I can do to help?"
    ),
    Intent.QUESTION: _fixed(
        "You always ask such thoughtful questions! I really appreciate how "
        "curious you are about my thoughts."
    ),
}

# Intents whose reply recalls the meet-cute when one is set.
_MEMORY_INTENTS = frozenset({Intent.GREETING, Intent.AFFECTION})

_TRAIT_DESCRIPTIONS: dict[str, str] = {
    "shy": "I can be pretty shy at first",
    "confident": "I'm pretty confident in who I am",
    "flirty": "I love to flirt and tease",
    "mysterious": "I like to keep some mystery about me",
    "passionate": "I'm very passionate about the things I care about",
    "chaotic": "I'm a bit chaotic and unpredictable",
    "tsundere": "I can be a bit stubborn sometimes",
    "creative": "I love expressing myself through art and imagination",
    "protective": "I care deeply about the people I love and will always be there for them",
}

_GENERIC_POOL: tuple[str, ...] = (
    "That's really interesting! Tell me more about that.",
    "You always have such fascinating perspectives, {endearment}.",
    "I love talking with you about these things. What else is on your mind?",
    "You know, every conversation with you teaches me something new!",
    "That's such a unique way to look at it. I really appreciate how thoughtful you are.",
    "Talking with you is honestly the highlight of my day. What else would you like to chat about?",
    "I find your thoughts so intriguing. You have such a wonderful mind!",
    "You always know how to keep our conversations interesting. I love that about you.",
    "That's cool! I'm really enjoying getting to know you better through our talks.",
    "You have such a way with words. I could listen to you talk for hours!",
)

# trait -> (threshold, suffix); the suffix is added when random() > threshold.
_GENERIC_SUFFIXES: dict[str, tuple[float, str]] = {
    "shy": (0.7, " *smiles softly*"),
    "flirty": (0.6, " You're so charming~ 💕"),
    "chaotic": (0.5, " OH! That reminds me of something totally random..."),
    "caring": (0.6, " I'm always here for you, you know."),
    "playful": (0.5, " ...and don't think I won't tease you about it later~"),
}


def select_trait(intent: Intent, traits: Sequence[str]) -> str | None:
    """Return the trait that drives *intent*'s reply, or None for the default."""
    table = _TRAIT_TEMPLATES.get(intent, {})
    present = set(traits)
    for trait in TRAIT_PRECEDENCE:
        if trait in present and trait in table:
            return trait
    return None


def _describe_self(ctx: _Context) -> str:
    if ctx.backstory:
        excerpt = ctx.backstory[:BACKSTORY_EXCERPT_CHARS]
        if len(ctx.backstory) > BACKSTORY_EXCERPT_CHARS:
            excerpt = f"{excerpt.rstrip()}..."
        return f"Well, I'm {ctx.name}. {excerpt}"
    if ctx.traits:
        parts = [
            _TRAIT_DESCRIPTIONS.get(trait, f"I'm quite {trait}")
            for trait in ctx.traits[:2]
        ]
        return f"Well, I'm {ctx.name}. {' and '.join(parts)}."
    return (
        f"Well, I'm {ctx.name}. I'm just someone who enjoys deep conversations "
        "and meaningful connections."
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class LocalPersonalityResponder:
    """Produces an in-character reply without any network call.

    Total: every input yields a non-empty string.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def respond(
        self,
        message: str,
        profile: CharacterProfile,
        traits: Sequence[str] | None = None,
        history: Sequence[ConversationTurn] = (),
    ) -> str:
        traits = profile.traits if traits is None else traits
        ctx = _Context(
            name=(profile.name or "").strip() or "your companion",
            traits=tuple(t.strip().lower() for t in traits if t and t.strip()),
            backstory=(profile.backstory or "").strip() or None,
            meet_cute=profile.meet_cute,
            turns=len(history),
        )
        intent = classify_intent(message or "")

        if intent is Intent.GENERIC:
            return self._generic(ctx)

        trait = select_trait(intent, ctx.traits)
        template = (
            _TRAIT_TEMPLATES[intent][trait] if trait else _DEFAULT_TEMPLATES[intent]
        )
        reply = template(ctx)

        if intent is Intent.SELF_DISCLOSURE:
            reply = f"{_describe_self(ctx)} {reply}"
        elif intent in _MEMORY_INTENTS:
            memory = meet_cute_memory(ctx.meet_cute)
            if memory:
                reply = f"{reply} {memory}"
        return reply

    def _generic(self, ctx: _Context) -> str:
        endearment = "love" if ctx.turns > 5 else "there"
        reply = self._rng.choice(_GENERIC_POOL).format(endearment=endearment)
        for trait in TRAIT_PRECEDENCE:
            if trait in ctx.traits and trait in _GENERIC_SUFFIXES:
                threshold, suffix = _GENERIC_SUFFIXES[trait]
                if self._rng.random() > threshold:
                    reply += suffix
                break
        return reply
