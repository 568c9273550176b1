"""Spanish stop words, negation cues, POS suffix rules and emotion names."""

# Lemma forms: matched against lemmatized tokens as well as lowercase
# surfaces, so conjugated forms are caught through the lemmatizer.
STOP_WORDS: frozenset[str] = frozenset({
    # Articles ("uno" because the lemmatizer maps un/una/unos/unas to it)
    "el", "la", "los", "las", "un", "una", "uno", "unos", "unas", "lo",
    # Prepositions
    "a", "ante", "bajo", "con", "contra", "de", "desde", "en", "entre",
    "hacia", "hasta", "para", "por", "según", "sin", "sobre", "tras",
    "durante", "mediante",
    # Conjunctions
    "y", "e", "o", "u", "ni", "que", "pero", "sino", "aunque", "porque",
    "pues", "como", "si", "cuando", "donde", "mientras",
    # Personal pronouns
    "yo", "tú", "él", "ella", "usted", "nosotros", "nosotras",
    "vosotros", "vosotras", "ellos", "ellas", "ustedes",
    "me", "te", "se", "nos", "os", "le", "les",
    "mí", "ti", "sí", "conmigo", "contigo", "consigo",
    # Demonstratives
    "este", "esta", "esto", "estos", "estas",
    "ese", "esa", "eso", "esos", "esas",
    "aquel", "aquella", "aquello", "aquellos", "aquellas",
    # Possessives
    "mi", "mis", "tu", "tus", "su", "sus",
    "nuestro", "nuestra", "nuestros", "nuestras",
    "vuestro", "vuestra", "vuestros", "vuestras",
    "suyo", "suya", "suyos", "suyas",
    "mío", "mía", "míos", "mías",
    "tuyo", "tuya", "tuyos", "tuyas",
    # Relatives and interrogatives
    "quien", "quienes", "cual", "cuales",
    "cuyo", "cuya", "cuyos", "cuyas",
    # Auxiliary and very common verbs
    "ser", "estar", "haber", "tener", "hacer", "poder", "ir",
    "decir", "dar", "saber", "querer", "deber", "poner", "parecer",
    "quedar", "creer", "llevar", "pasar", "seguir", "encontrar",
    "venir", "pensar", "salir", "volver", "tomar", "conocer",
    "vivir", "sentir", "tratar", "mirar", "contar", "empezar",
    "esperar", "buscar", "llamar", "hablar", "dejar", "recibir", "acabar",
    # Adverbs
    "no", "muy", "más", "menos", "ya", "también", "tampoco",
    "bien", "mal", "mucho", "poco", "bastante", "demasiado",
    "tan", "tanto", "así", "aquí", "ahí", "allí", "acá", "allá",
    "siempre", "nunca", "jamás", "todavía", "aún", "además",
    "entonces", "después", "antes", "luego", "ahora",
    "hoy", "ayer", "mañana", "pronto", "tarde",
    "cerca", "lejos", "dentro", "fuera", "arriba", "abajo",
    "encima", "debajo", "delante", "detrás",
    # Discourse markers ("bueno" stays a content word: it carries polarity)
    "claro", "vale", "verdad", "realmente",
    "básicamente", "literalmente", "simplemente",
    # Other high-frequency function words
    "otro", "otra", "otros", "otras", "todo", "toda", "todos", "todas",
    "mismo", "misma", "mismos", "mismas",
    "cada", "algo", "alguien", "alguno", "alguna", "algunos", "algunas",
    "nada", "nadie", "ninguno", "ninguna",
    "del", "al",
})

# Surface forms that open a negation window.
NEGATION_WORDS: frozenset[str] = frozenset({
    "no", "nunca", "jamás", "tampoco", "ni",
    "ninguno", "ninguna", "ningunos", "ningunas", "ningún",
    "nada", "nadie", "sin", "apenas",
})

# Multi-word negation cues, matched as phrases over the lowercased text.
NEGATION_PHRASES: tuple[str, ...] = (
    "ni siquiera",
)

# Fallback POS rules: (suffix, tag), first match wins.
POS_SUFFIXES: tuple[tuple[str, str], ...] = (
    # Nouns
    ("ción", "n"), ("sión", "n"), ("miento", "n"), ("idad", "n"), ("dad", "n"),
    ("eza", "n"), ("anza", "n"), ("encia", "n"), ("ancia", "n"), ("ismo", "n"),
    ("ista", "n"), ("aje", "n"), ("ura", "n"),
    # Verbs: gerund, participle, infinitive, imperfect, preterite
    ("ando", "v"), ("iendo", "v"), ("ado", "v"), ("ido", "v"),
    ("ar", "v"), ("er", "v"), ("ir", "v"),
    ("aba", "v"), ("ían", "v"), ("aron", "v"), ("ieron", "v"),
    # Adverbs
    ("mente", "r"),
    # Adjectives
    ("oso", "a"), ("osa", "a"), ("ivo", "a"), ("iva", "a"),
    ("ble", "a"), ("ante", "a"), ("ente", "a"), ("ual", "a"),
    ("ico", "a"), ("ica", "a"), ("al", "a"),
)

POS_TAGS: tuple[str, ...] = ("n", "v", "a", "r")

# NRC EmoLex emotion set.
EMOTIONS: tuple[str, ...] = (
    "anger", "anticipation", "disgust", "fear",
    "joy", "sadness", "surprise", "trust",
)

# Emotions tracked per Fibras segment.
TRACKED_EMOTIONS: tuple[str, ...] = ("joy", "fear", "sadness", "anger")
