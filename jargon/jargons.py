"""
Jargon buffer: the remaining, unconsumed command-line tokens.

What this module provides
- Jargon: an ordered, mutable list of raw tokens. Element 0 is reserved for
  the program name (or, in a handler, the subcommand name it put back in
  front) and is only dropped by finish().
- Queries, each a single left-to-right scan that removes what it matched:
  • contains / contains_unmut          presence of a flag
  • option_arg / option_arg_unmut      value following a flag
  • result_arg                         same, absence raises MissingArgumentError
  • on_subcommand / opt_on_subcommand / res_on_subcommand
                                       hand the tail after a subcommand word
                                       to a handler
  • subcommand / subcommand_nomut      return that tail instead
  • dispatch                           explicit {key: handler} table
  • finish                             drop element 0 and hand back the rest

Every query accepts what Key.of accepts: a token ("-a", "--all", "list"), a
pair for a dual flag (["-a", "--all"]), or a Key.

Quick start
    from jargon import Jargon

    jargon = Jargon.from_env()
    if jargon.contains(["-h", "--help"]):
        ...
    suffix = jargon.option_arg(["-s", "--suffix"])
    names = jargon.finish()

Ownership
- A Jargon must not be shared between threads nor queried through aliases
  concurrently; copy() it instead. Handlers always receive a fresh list.
"""
import sys
from collections.abc import Iterable, Mapping

from .faults import JargonException, MissingArgumentError, DelegatedError, EmptyBufferError
from .keys import Key
from .utils import Unset, mirror


def _locate(tokens, key):
    """
    index of the first token matching key, or -1.

    a DUAL key matches a token classifying as either of its forms; an
    unclassifiable token (empty string, bare prefix run) never matches.
    """
    forms = key.forms()
    for index, token in enumerate(tokens):
        if Key.classify(token) in forms:
            return index
    return -1


def _locate_subcommand(tokens, keys):
    """
    (index, key) of the first token that is a subcommand word among keys,
    or (-1, None).
    """
    for index, token in enumerate(tokens):
        if (candidate := Key.classify(token)) is not None and candidate.is_sub() and candidate in keys:
            return index, candidate
    return -1, None


class Jargon:
    """
    Mutable buffer of raw command-line tokens with consuming queries.

    Construction
    - Jargon(tokens) / Jargon.from_list(tokens): any iterable; every item is
      converted with str().
    - Jargon.from_env(): the process tokens (sys.argv), read once.

    Container protocol
    - len(), iteration over the remaining tokens, equality with another Jargon.
    - `key in jargon` is the non-mutating presence test (contains_unmut).
    - tokens: read-only tuple snapshot.
    """
    __slots__ = ("_tokens",)

    tokens = mirror("tokens")

    def __init__(self, tokens=(), /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("Jargon() argument must be an iterable of tokens")
        self._tokens = [str(token) for token in tokens]

    @classmethod
    def from_list(cls, tokens, /):
        """
        build a buffer from an explicit token list (tests, nested dispatch).
        """
        return cls(tokens)

    @classmethod
    def from_env(cls):
        """
        build a buffer from the process arguments; element 0 is the program.
        """
        return cls(sys.argv)

    def copy(self):
        return type(self)(self._tokens)

    __copy__ = copy

    # --- presence ---

    def contains(self, key, /):
        """
        remove the first token matching key and return True; False otherwise.

        for a dual key either form matches ("-a" or "--all" for ["-a", "--all"]).
        """
        if (index := _locate(self._tokens, Key.of(key))) < 0:
            return False
        del self._tokens[index]
        return True

    def contains_unmut(self, key, /):
        """
        presence test that never changes the buffer.
        """
        return _locate(self._tokens, Key.of(key)) >= 0

    # --- values ---

    def option_arg(self, key, /):
        """
        value following key, or None.

        behavior
        - the key token is located exactly as contains() does.
        - the next token is the value unless it starts with the key's prefix
          character (it looks like another flag) or does not exist; in both
          cases None is returned and nothing is removed.
        - on success both the key token and its value are removed.
        """
        key = Key.of(key)
        index = _locate(self._tokens, key)
        if index < 0 or index + 1 >= len(self._tokens):
            return None
        value = self._tokens[index + 1]
        if value.startswith(key.char()):
            return None
        del self._tokens[index:index + 2]
        return value

    def option_arg_unmut(self, key, /):
        """
        option_arg() on a throwaway copy; the buffer is left untouched.
        """
        return self.copy().option_arg(key)

    def result_arg(self, key, /):
        """
        option_arg() where absence is an error.

        raises
        - MissingArgumentError carrying the queried Key when no value was found.
        """
        key = Key.of(key)
        if (value := self.option_arg(key)) is None:
            raise MissingArgumentError(key)
        return value

    # --- subcommands ---

    def _slice(self, index):
        """
        cut the buffer at index and return the tokens after it as a new list.
        """
        rest = self._tokens[index + 1:]
        del self._tokens[index:]
        return rest

    def _forward(self, keys):
        index, key = _locate_subcommand(self._tokens, keys)
        if index < 0:
            return None, Unset
        return key, self._slice(index)

    def on_subcommand(self, key, handler, /):
        """
        call handler(rest) when the subcommand word key is present.

        behavior
        - only a token classifying as a subcommand equal to key matches, so a
          flag key never dispatches.
        - on match the buffer is cut at the subcommand word: the parent keeps
          the tokens before it, the handler receives a new list with the
          tokens after it (the word itself is dropped).
        - without a match the buffer is untouched and handler is not called.

        a handler that parses further typically builds Jargon(["name", *rest])
        so that the reserved element 0 is its own name again; finish() on that
        buffer then returns exactly rest minus whatever the handler consumed.
        """
        self.opt_on_subcommand(key, handler)

    def opt_on_subcommand(self, key, handler, /):
        """
        on_subcommand() returning the handler's result (None when no match).
        """
        _, rest = self._forward(frozenset((Key.of(key),)))
        if rest is Unset:
            return None
        return handler(rest)

    def res_on_subcommand(self, key, handler, /):
        """
        on_subcommand() where absence is an error.

        raises
        - MissingArgumentError(key) when the subcommand is not present.
        - DelegatedError when handler raised anything that is not a jargon
          fault (chained from the original exception).
        """
        key = Key.of(key)
        _, rest = self._forward(frozenset((key,)))
        if rest is Unset:
            raise MissingArgumentError(key)
        try:
            return handler(rest)
        except JargonException:
            raise
        except Exception as exception:
            raise DelegatedError.wrap(exception) from exception

    def subcommand(self, key, /):
        """
        tokens a handler would receive for key, or None when key is absent.

        the buffer is cut exactly as on_subcommand() would cut it.
        """
        _, rest = self._forward(frozenset((Key.of(key),)))
        return None if rest is Unset else rest

    def subcommand_nomut(self, key, /):
        """
        subcommand() on a throwaway copy; the buffer is left untouched.
        """
        return self.copy().subcommand(key)

    def dispatch(self, table, /):
        """
        dispatch through an explicit table of subcommand handlers.

        parameters
        - table: Mapping[key-like, Callable[[list[str]], Any]]

        behavior
        - the first buffer token that is a subcommand listed in table wins,
          whatever the table order; the buffer is cut as in on_subcommand().

        returns
        - the handler's result, or None when no listed subcommand is present.
        """
        if not isinstance(table, Mapping):
            raise TypeError("dispatch() argument must be a mapping of keys to handlers")
        handlers = {}
        for source, handler in table.items():
            if not (key := Key.of(source)).is_sub():
                raise TypeError("dispatch() keys must be subcommand words, got %r" % str(key))
            if not callable(handler):
                raise TypeError("dispatch() handler for %r must be callable" % str(key))
            handlers[key] = handler
        key, rest = self._forward(handlers.keys())
        if rest is Unset:
            return None
        return handlers[key](rest)

    # --- finalization ---

    def finish(self):
        """
        consume the buffer: drop element 0 and return the remaining tokens.

        the buffer is left empty afterwards.

        raises
        - EmptyBufferError when there is no element 0 to drop (empty or
          already finished buffer).
        """
        if not self._tokens:
            raise EmptyBufferError(
                "cannot finish an empty buffer",
                hint="build the buffer with the program name as its first token"
            )
        rest = self._tokens[1:]
        self._tokens.clear()
        return rest

    # --- container protocol ---

    def __contains__(self, key, /):
        return self.contains_unmut(key)

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(tuple(self._tokens))

    def __eq__(self, other):
        if not isinstance(other, Jargon):
            return NotImplemented
        return self._tokens == other._tokens

    __hash__ = None

    def __repr__(self):
        return "jargon(%r)" % self._tokens

    def __rich_repr__(self):
        yield self.tokens


__all__ = (
    "Jargon",
)
