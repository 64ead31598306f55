"""Built-in lesson catalog, keyed by language id."""
from typing import Dict, List

from schemas import ContentItem, Flashcard, Language, Lesson

LANGUAGES = [
    Language(id="spanish", name="Spanish", flag="🇪🇸"),
    Language(id="french", name="French", flag="🇫🇷"),
    Language(id="german", name="German", flag="🇩🇪"),
    Language(id="japanese", name="Japanese", flag="🇯🇵"),
]

DEFAULT_LANGUAGE = "spanish"


def _greetings(*rows) -> Lesson:
    return Lesson(
        id="1",
        title="Basic Greetings",
        category="Vocabulary",
        difficulty="Beginner",
        content=[ContentItem(word=w, translation=t, pronunciation=p) for w, t, p in rows],
    )


LESSONS: Dict[str, List[Lesson]] = {
    "spanish": [
        _greetings(
            ("Hola", "Hello", "OH-lah"),
            ("Adiós", "Goodbye", "ah-DYOHS"),
            ("Gracias", "Thank you", "GRAH-syahs"),
            ("Por favor", "Please", "por fah-BOR"),
            ("Lo siento", "Sorry", "loh SYEN-toh"),
        ),
        Lesson(
            id="2",
            title="Common Phrases",
            category="Phrases",
            difficulty="Beginner",
            content=[
                ContentItem(phrase="¿Cómo estás?", translation="How are you?", pronunciation="KOH-moh ehs-TAHS"),
                ContentItem(phrase="Me llamo...", translation="My name is...", pronunciation="meh YAH-moh"),
                ContentItem(phrase="¿Dónde está el baño?", translation="Where is the bathroom?",
                            pronunciation="DOHN-deh ehs-TAH el BAH-nyoh"),
                ContentItem(phrase="No entiendo", translation="I don't understand", pronunciation="noh en-TYEN-doh"),
            ],
        ),
        Lesson(
            id="3",
            title="Numbers 1-10",
            category="Numbers",
            difficulty="Beginner",
            content=[
                ContentItem(word=w, translation=t, pronunciation=p) for w, t, p in [
                    ("Uno", "One", "OO-noh"),
                    ("Dos", "Two", "dohs"),
                    ("Tres", "Three", "tres"),
                    ("Cuatro", "Four", "KWAH-troh"),
                    ("Cinco", "Five", "SEEN-koh"),
                    ("Seis", "Six", "says"),
                    ("Siete", "Seven", "SYEH-teh"),
                    ("Ocho", "Eight", "OH-choh"),
                    ("Nueve", "Nine", "NWEH-beh"),
                    ("Diez", "Ten", "dyes"),
                ]
            ],
        ),
    ],
    "french": [
        _greetings(
            ("Bonjour", "Hello", "bohn-ZHOOR"),
            ("Au revoir", "Goodbye", "oh ruh-VWAHR"),
            ("Merci", "Thank you", "mehr-SEE"),
            ("S'il vous plaît", "Please", "seel voo PLEH"),
            ("Désolé", "Sorry", "deh-zoh-LEH"),
        ),
    ],
    "german": [
        _greetings(
            ("Hallo", "Hello", "HAH-loh"),
            ("Auf Wiedersehen", "Goodbye", "owf VEE-der-zayn"),
            ("Danke", "Thank you", "DAHN-keh"),
            ("Bitte", "Please", "BIT-teh"),
            ("Entschuldigung", "Sorry", "ent-SHOOL-dee-goong"),
        ),
    ],
    "japanese": [
        _greetings(
            ("こんにちは", "Hello", "kon-nichi-wa"),
            ("さようなら", "Goodbye", "sa-yo-na-ra"),
            ("ありがとう", "Thank you", "a-ri-ga-to"),
            ("お願いします", "Please", "o-ne-gai-shi-ma-su"),
            ("ごめんなさい", "Sorry", "go-men-na-sai"),
        ),
    ],
}


def get_lessons(language: str) -> List[Lesson]:
    """Lessons for a language, empty for an unknown one."""
    return list(LESSONS.get(language, []))


def content_pool(language: str) -> List[ContentItem]:
    """Every content item of a language, in lesson order."""
    return [item for lesson in get_lessons(language) for item in lesson.content]


def flashcards(language: str) -> List[Flashcard]:
    return [
        Flashcard(**item.model_dump(), category=lesson.category)
        for lesson in get_lessons(language)
        for item in lesson.content
    ]
