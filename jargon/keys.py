r"""
Jargon keys: the classified shape of a command-line token.

Overview
- KeyKind: closed set of variants, declared in ordering order
  (SHORT, LONG, DUAL, SUB).
- Key: immutable tagged value holding a KeyKind plus the fields that variant
  uses. One class, four shapes; behavior switches on the tag, never on
  subclasses.

Classification (Key.parse("..."))
- first character alphabetic       → SUB   ("list"   → word "list")
- otherwise, exactly one more char → SHORT ("-a"     → prefix "-", letter "a")
- otherwise                        → LONG  ("--all"  → prefix "-", word "all";
                                            the whole run of leading prefix
                                            characters is stripped)

Pairing (Key.parse(["-a", "--all"]))
- one SHORT and one LONG sharing the same prefix, in any order → DUAL.
- a SUB in the pair, or any other combination, raises InvalidDualError at
  construction time.

Display
- SHORT "-a", LONG "--all", DUAL "-a, --all", SUB "list".

Coercion
- Key.of(x) (also Key(x)) accepts a Key, a token string, or a two-element
  list/tuple; every buffer query funnels its argument through it.
"""
import functools
from enum import IntEnum
from typing import final

from .faults import InvalidTokenError, InvalidDualError
from .utils import mirror


class KeyKind(IntEnum):
    """
    variant tag of a Key (declaration order is the ordering order).
    """
    SHORT = 1
    LONG = 2
    DUAL = 3
    SUB = 4


def _classify(token):
    """
    classify a raw token into (kind, prefix, letter, word), or None.

    None means the token has no key shape at all (empty, or only made of its
    prefix character such as "-" or "---"). Buffer scans use this lenient
    form so that arbitrary argv entries never raise; Key.parse turns None
    into an error.
    """
    if not token:
        return None
    lead = token[0]
    if lead.isalpha():
        return KeyKind.SUB, None, None, token
    if len(token) == 2:
        return KeyKind.SHORT, lead, token[1], None
    if not (word := token.lstrip(lead)):
        return None
    return KeyKind.LONG, lead, None, word


def _is_char(value):
    return isinstance(value, str) and len(value) == 1


@final
@functools.total_ordering
class Key:
    """
    Classified command-line token.

    Fields (read-only properties)
    - kind: KeyKind
    - prefix: str | None   lead character ("-" for "-a"/"--all"); None for SUB
    - letter: str | None   short character; SHORT and DUAL only
    - word: str | None     long word (LONG, DUAL) or subcommand word (SUB)

    Semantics
    - immutable; equality and hashing cover the tag and every field, so
      Key.parse("-a") != Key.parse("--a") and a DUAL never equals either of
      its forms.
    - ordered by (kind, prefix, letter, word) for use in sorted containers.
    """
    __slots__ = ("_kind", "_prefix", "_letter", "_word")
    __introspectable__ = ("kind", "prefix", "letter", "word")

    kind = mirror("kind")
    prefix = mirror("prefix")
    letter = mirror("letter")
    word = mirror("word")

    def __new__(cls, source, /):
        return cls.of(source)

    @classmethod
    def _build(cls, kind, prefix, letter, word):
        self = object.__new__(cls)
        object.__setattr__(self, "_kind", KeyKind(kind))
        object.__setattr__(self, "_prefix", prefix)
        object.__setattr__(self, "_letter", letter)
        object.__setattr__(self, "_word", word)
        return self

    # --- named constructors ---

    @classmethod
    def short(cls, prefix, letter, /):
        """
        build a SHORT key, e.g. Key.short("-", "a") for "-a".
        """
        if not _is_char(prefix) or prefix.isalpha():
            raise InvalidTokenError("short key prefix must be one non-alphabetic character, got %r" % (prefix,))
        if not _is_char(letter):
            raise InvalidTokenError("short key must name exactly one character, got %r" % (letter,))
        return cls._build(KeyKind.SHORT, prefix, letter, None)

    @classmethod
    def long(cls, prefix, word, /):
        """
        build a LONG key, e.g. Key.long("-", "all") for "--all".
        """
        if not _is_char(prefix) or prefix.isalpha():
            raise InvalidTokenError("long key prefix must be one non-alphabetic character, got %r" % (prefix,))
        if not isinstance(word, str) or not word or word.startswith(prefix):
            raise InvalidTokenError("long key word must be non-empty and not start with %r, got %r" % (prefix, word))
        return cls._build(KeyKind.LONG, prefix, None, word)

    @classmethod
    def dual(cls, prefix, letter, word, /):
        """
        build a DUAL key, e.g. Key.dual("-", "a", "all") for "-a, --all".
        """
        short, long = cls.short(prefix, letter), cls.long(prefix, word)
        return cls._build(KeyKind.DUAL, prefix, short.letter, long.word)

    @classmethod
    def sub(cls, word, /):
        """
        build a SUB key, e.g. Key.sub("list").
        """
        if not isinstance(word, str) or not word or not word[0].isalpha():
            raise InvalidTokenError("subcommand must start with an alphabetic character, got %r" % (word,))
        return cls._build(KeyKind.SUB, None, None, word)

    # --- parsing ---

    @classmethod
    def parse(cls, source, /):
        """
        classify a token, or pair two tokens into a DUAL key.

        parameters
        - source: str | list | tuple
          • str: a single token ("-a", "--all", "list").
          • two-element list/tuple of tokens or Keys: the short and long
            form of one flag, in either order.

        raises
        - TypeError: source is neither a string nor a list/tuple.
        - InvalidTokenError: the token is empty or has no key shape ("-", "---").
        - InvalidDualError: the pair is not exactly one SHORT and one LONG
          sharing a prefix (a SUB in the pair always lands here).

        a pair such as ["+a", "--all"] is rejected on purpose rather than
        adopting the long form's prefix: the resulting key could never match
        its own short form during a scan.
        """
        if isinstance(source, str):
            if (fields := _classify(source)) is None:
                raise InvalidTokenError(
                    "cannot classify token %r" % source,
                    hint="tokens must be a subcommand word, '-x' or '--word'"
                )
            return cls._build(*fields)
        if isinstance(source, (list, tuple)):
            return cls._pair(source)
        raise TypeError("Key.parse() argument must be a string or a pair of strings, not %r" % type(source).__name__)

    @classmethod
    def _pair(cls, pair):
        if len(pair) != 2:
            raise InvalidDualError("a dual key needs exactly two tokens, got %d" % len(pair))
        one, two = (element if isinstance(element, Key) else cls.parse(element) for element in pair)

        if one.is_sub() or two.is_sub():
            raise InvalidDualError(
                "dual cannot contain a subcommand: %s / %s" % (one, two),
                hint="pair a short flag with a long flag, e.g. ['-a', '--all']"
            )

        if one.is_long() and two.is_short():
            long, short = one, two
        elif one.is_short() and two.is_long():
            short, long = one, two
        else:
            raise InvalidDualError(
                "dual needs one short and one long form: %s / %s" % (one, two),
                hint="pair a short flag with a long flag, e.g. ['-a', '--all']"
            )

        if short.prefix != long.prefix:
            raise InvalidDualError("dual forms must share a prefix: %s / %s" % (short, long))
        return cls._build(KeyKind.DUAL, long.prefix, short.letter, long.word)

    @classmethod
    def of(cls, source, /):
        """
        coerce anything key-like into a Key (Keys pass through unchanged).
        """
        if isinstance(source, Key):
            return source
        if isinstance(source, (str, list, tuple)):
            return cls.parse(source)
        raise TypeError("key must be a string, a pair of strings or a Key, not %r" % type(source).__name__)

    @classmethod
    def classify(cls, token, /):
        """
        lenient parse used by buffer scans: return None instead of raising
        for a token that has no key shape.
        """
        if (fields := _classify(token)) is None:
            return None
        return cls._build(*fields)

    # --- accessors ---

    def char(self):
        """lead prefix character, or "\\0" for a subcommand."""
        return "\0" if self._kind is KeyKind.SUB else self._prefix

    def text(self):
        """display word: the long word for DUAL, the letter for SHORT."""
        return self._letter if self._kind is KeyKind.SHORT else self._word

    def is_short(self):
        return self._kind is KeyKind.SHORT

    def is_long(self):
        return self._kind is KeyKind.LONG

    def is_dual(self):
        return self._kind is KeyKind.DUAL

    def is_sub(self):
        return self._kind is KeyKind.SUB

    def forms(self):
        """
        keys a buffer token may classify as to match this key.

        a DUAL stands for its SHORT and LONG forms; every other key only for
        itself.
        """
        if self._kind is KeyKind.DUAL:
            return (
                Key._build(KeyKind.SHORT, self._prefix, self._letter, None),
                Key._build(KeyKind.LONG, self._prefix, None, self._word),
            )
        return (self,)

    # --- value semantics ---

    def _astuple(self):
        return self._kind, self._prefix or "", self._letter or "", self._word or ""

    def __eq__(self, other):
        if not isinstance(other, Key):
            return NotImplemented
        return self._astuple() == other._astuple()

    def __lt__(self, other):
        if not isinstance(other, Key):
            return NotImplemented
        return self._astuple() < other._astuple()

    def __hash__(self):
        return hash(self._astuple())

    def __setattr__(self, name, value, /):
        raise AttributeError("'Key' object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("'Key' object is immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return Key._build, (self._kind, self._prefix, self._letter, self._word)

    def __str__(self):
        match self._kind:
            case KeyKind.SHORT:
                return "%s%s" % (self._prefix, self._letter)
            case KeyKind.LONG:
                return "%s%s%s" % (self._prefix, self._prefix, self._word)
            case KeyKind.DUAL:
                return "%s%s, %s%s%s" % (self._prefix, self._letter, self._prefix, self._prefix, self._word)
            case KeyKind.SUB:
                return self._word

    def __repr__(self):
        return "key(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "kind", self._kind.name.lower()
        for name in type(self).__introspectable__[1:]:
            if (value := getattr(self, name)) is not None:
                yield name, value

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Key' is not an acceptable base type")


__all__ = (
    "KeyKind",
    "Key",
)
