import random
from pathlib import Path

import pytest

from ciphersolver.classical import register_all
from ciphersolver.classical.common import Key

DATA = Path(__file__).parent / "data"

PRIDE = """\
It is a truth universally acknowledged, that a single man in possession
of a good fortune, must be in want of a wife. However little known the
feelings or views of such a man may be on his first entering a
neighbourhood, this truth is so well fixed in the minds of the
surrounding families, that he is considered the rightful property of
some one or other of their daughters. "My dear Mr. Bennet," said his
lady to him one day, "have you heard that Netherfield Park is let at
last?" Mr. Bennet replied that he had not. "But it is," returned she;
"for Mrs. Long has just been here, and she told me all about it." Mr.
Bennet made no answer. "Do you not want to know who has taken it?"
cried his wife impatiently. "You want to tell me, and I have no
objection to hearing it." This was invitation enough. "Why, my dear,
you must know, Mrs. Long says that Netherfield is taken by a young man
of large fortune from the north of England; that he came down on Monday
in a chaise and four to see the place, and was so much delighted with
it, that he agreed with Mr. Morris immediately; that he is to take
possession before Michaelmas, and some of his servants are to be in the
house by the end of next week."
"""


@pytest.fixture(autouse=True, scope="session")
def _plugins():
    register_all()


@pytest.fixture
def pride_text():
    return PRIDE


@pytest.fixture
def hamlet_quote():
    return "To be, or not to be, that is the question."


@pytest.fixture
def secret_key():
    return Key.from_targets("QWERTYUIOPASDFGHJKLZXCVBNM")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def chapter_text(pride_text):
    """The opening chapter: the passage above followed by the dialogue after it."""
    return pride_text + (DATA / "chapter.txt").read_text(encoding="utf-8")


@pytest.fixture
def austen_reference():
    """Other Austen passages, none of which appear in chapter_text."""
    return (DATA / "reference.txt").read_text(encoding="utf-8")
