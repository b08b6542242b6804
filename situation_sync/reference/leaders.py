"""Tracked heads of state and government."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Leader:
    id: str
    name: str
    title: str
    country: str
    flag: str
    keywords: tuple[str, ...]
    since: str  # "Mon YYYY"
    party: str | None = None
    focus: tuple[str, ...] = field(default_factory=tuple)


WORLD_LEADERS: tuple[Leader, ...] = (
    Leader(
        "trump", "Donald Trump", "President", "United States", "US",
        ("trump", "potus", "white house"), "Jan 2025", "Republican",
        ("tariffs", "immigration", "deregulation"),
    ),
    Leader(
        "xi", "Xi Jinping", "President", "China", "CN",
        ("xi jinping", "xi", "chinese president"), "Mar 2013", "CCP",
        ("taiwan", "belt and road", "tech dominance"),
    ),
    Leader(
        "putin", "Vladimir Putin", "President", "Russia", "RU",
        ("putin", "kremlin", "russian president"), "May 2012", "United Russia",
        ("ukraine war", "nato expansion", "energy"),
    ),
    Leader(
        "starmer", "Keir Starmer", "Prime Minister", "United Kingdom", "GB",
        ("starmer", "uk pm", "british prime minister"), "Jul 2024", "Labour",
    ),
    Leader(
        "macron", "Emmanuel Macron", "President", "France", "FR",
        ("macron", "french president", "elysee"), "May 2017", "Renaissance",
    ),
    Leader(
        "scholz", "Olaf Scholz", "Chancellor", "Germany", "DE",
        ("scholz", "german chancellor", "berlin"), "Dec 2021", "SPD",
    ),
    Leader(
        "meloni", "Giorgia Meloni", "Prime Minister", "Italy", "IT",
        ("meloni", "italian pm", "italy prime minister"), "Oct 2022", "Brothers of Italy",
    ),
    Leader(
        "netanyahu", "Benjamin Netanyahu", "Prime Minister", "Israel", "IL",
        ("netanyahu", "bibi", "israeli pm"), "Dec 2022", "Likud",
        ("gaza", "iran", "judicial reform"),
    ),
    Leader(
        "mbs", "Mohammed bin Salman", "Crown Prince", "Saudi Arabia", "SA",
        ("mbs", "saudi crown prince", "bin salman"), "Jun 2017", "Royal Family",
        ("vision 2030", "oil", "regional influence"),
    ),
    Leader(
        "khamenei", "Ali Khamenei", "Supreme Leader", "Iran", "IR",
        ("khamenei", "supreme leader", "ayatollah"), "Jun 1989", "Islamic Republic",
        ("nuclear program", "proxies", "sanctions"),
    ),
    Leader(
        "modi", "Narendra Modi", "Prime Minister", "India", "IN",
        ("modi", "indian pm", "india prime minister"), "May 2014", "BJP",
        ("economy", "china border", "technology"),
    ),
    Leader(
        "kim", "Kim Jong Un", "Supreme Leader", "North Korea", "KP",
        ("kim jong un", "north korea", "pyongyang"), "Dec 2011", "Workers Party",
        ("nuclear", "missiles", "russia alliance"),
    ),
    Leader(
        "zelensky", "Volodymyr Zelensky", "President", "Ukraine", "UA",
        ("zelensky", "ukraine president", "kyiv"), "May 2019", "Servant of the People",
        ("war", "western aid", "nato membership"),
    ),
    Leader(
        "milei", "Javier Milei", "President", "Argentina", "AR",
        ("milei", "argentina president", "buenos aires"), "Dec 2023", "La Libertad Avanza",
        ("dollarization", "spending cuts", "deregulation"),
    ),
    Leader(
        "lula", "Luiz Inacio Lula da Silva", "President", "Brazil", "BR",
        ("lula", "brazil president", "brasilia"), "Jan 2023", "PT",
        ("amazon", "social programs", "brics"),
    ),
)
