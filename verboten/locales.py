"""Localized instructions and player-facing phrases.

Phrases use ``str.format`` placeholders. Adding a language means adding one
``Language`` entry to ``LANGUAGES`` and one partition to the word catalog.
"""

from __future__ import annotations

from pydantic import BaseModel


class Phrases(BaseModel):
    choose_language: str
    word_to_describe: str
    forbidden_words_are: str
    describe_the_word: str
    used_forbidden_word: str
    used_forbidden_inflection: str
    ai_guess: str
    ai_guessed_the_word: str
    word_was: str
    turn_failed: str


class Language(BaseModel):
    code: str
    name: str  # English name, used when asking for translations
    live_guesser_prompt: str
    chat_guesser_prompt: str
    phrases: Phrases


_EN = Language(
    code="en",
    name="English",
    live_guesser_prompt="""\
You are playing the "guessing word" game where the human player with their microphone
is describing a word. Your job is to listen to the description and say only one word as
your guess, every few seconds. You have only 3 guesses.
Don't say anything else than the word you're guessing.
""",
    chat_guesser_prompt="""\
You are the guesser in a game of "Proscribed Words".
I will describe a word to you. You have to guess what it is.
You only have 3 guesses.
I know the word to guess, but I cannot say it to you.
I also cannot say several other proscribed words.
Answer only in English.
Answer only with the word you think is the one I'm trying to let you guess.
Let's start.
""",
    phrases=Phrases(
        choose_language="Choose your language (en/fr/ar)",
        word_to_describe="The word to describe is: {}",
        forbidden_words_are="The proscribed words are: {}",
        describe_the_word="\nDescribe the word.\n> ",
        used_forbidden_word="Oh! You used the proscribed word '{}'. You lose!",
        used_forbidden_inflection="Oh! You said '{}' which is too close to the proscribed word '{}'. You lose!",
        ai_guess="AI: {}",
        ai_guessed_the_word="\nThe AI guessed the word! You win!",
        word_was="\nThe word was {}. You lose!",
        turn_failed="The referee could not rule on that description ({}). Please try again.",
    ),
)

_FR = Language(
    code="fr",
    name="French",
    live_guesser_prompt="""\
Vous jouez au jeu du "mot à deviner" où le joueur humain avec son microphone
décrit un mot. Votre travail consiste à écouter la description et à ne dire qu'un seul mot comme
votre suggestion, toutes les quelques secondes. Vous n'avez que 3 essais.
Ne dites rien d'autre que le mot que vous devinez.
""",
    chat_guesser_prompt="""\
Tu es le devineur dans une partie de "Mots Prohibés".
Je vais te décrire un mot. Tu dois deviner ce que c'est.
Tu n'as que 3 essais.
Je connais le mot à faire deviner, mais je ne peux pas te le dire.
Je ne peux pas non plus te dire plusieurs mots prohibés.
Réponds uniquement en Français.
Réponds uniquement le mot que tu supposes être celui que j'essaie de faire deviner.
Commençons.
""",
    phrases=Phrases(
        choose_language="Choisissez votre langue (en/fr/ar)",
        word_to_describe="Le mot à décrire est : {}",
        forbidden_words_are="Les mots prohibés sont : {}",
        describe_the_word="\nDécrivez le mot.\n> ",
        used_forbidden_word="Oh ! Vous avez utilisé le mot prohibé '{}'. Vous avez perdu !",
        used_forbidden_inflection="Oh ! Vous avez dit '{}' qui est trop proche du mot prohibé '{}'. Vous avez perdu !",
        ai_guess="IA : {}",
        ai_guessed_the_word="\nL'IA a deviné le mot ! Vous avez gagné !",
        word_was="\nLe mot était {}. Vous avez perdu !",
        turn_failed="L'arbitre n'a pas pu juger cette description ({}). Réessayez.",
    ),
)

_AR = Language(
    code="ar",
    name="Arabic",
    live_guesser_prompt="""\
أنت تلعب لعبة "تخمين الكلمات" حيث يقوم اللاعب البشري بميكروفونه بوصف كلمة.
مهمتك هي الاستماع إلى الوصف وقول كلمة واحدة فقط كتخمين، كل بضع ثوان.
لديك 3 تخمينات فقط.
لا تقل أي شيء آخر غير الكلمة التي تخمنها.
""",
    chat_guesser_prompt="""\
أنت المخمن في لعبة "الكلمات الممنوعة".
سأصف لك كلمة. عليك أن تخمن ما هي.
لديك 3 محاولات فقط.
أعرف الكلمة التي يجب تخمينها، لكن لا يمكنني قولها لك.
كما لا يمكنني قول العديد من الكلمات الممنوعة الأخرى.
أجب باللغة العربية فقط.
أجب فقط بالكلمة التي تعتقد أنها الكلمة التي أحاول أن أجعلك تخمنها.
لنبدأ.
""",
    phrases=Phrases(
        choose_language="اختر لغتك (en/fr/ar)",
        word_to_describe="الكلمة التي يجب وصفها هي: {}",
        forbidden_words_are="الكلمات الممنوعة هي: {}",
        describe_the_word="\nصف الكلمة.\n> ",
        used_forbidden_word="أوه! لقد استخدمت الكلمة الممنوعة '{}'. لقد خسرت!",
        used_forbidden_inflection="أوه! لقد قلت '{}' وهي قريبة جدًا من الكلمة الممنوعة '{}'. لقد خسرت!",
        ai_guess="الذكاء الاصطناعي: {}",
        ai_guessed_the_word="\nلقد خمن الذكاء الاصطناعي الكلمة! لقد فزت!",
        word_was="\nكانت الكلمة {}. لقد خسرت!",
        turn_failed="لم يتمكن الحكم من الحكم على هذا الوصف ({}). حاول مرة أخرى.",
    ),
)

LANGUAGES: dict[str, Language] = {lang.code: lang for lang in (_EN, _FR, _AR)}


def get_language(code: str) -> Language | None:
    return LANGUAGES.get(code)
