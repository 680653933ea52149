from __future__ import annotations

# Built-in quotes shown when no remote table is configured or it cannot be read.

SAMPLE_QUOTES = [
    {"text": "من جدّ وجد، ومن زرع حصد.", "author": "مثل عربي"},
    {"text": "العقل زينة، والقلم سلاح.", "author": "مجهول"},
    {"text": "السعادة قرار، لا حالة.", "author": "مجهول"},
    {"text": "سر النجاح هو الثبات على المبدأ.", "author": "مجهول"},
    {"text": "الوقت كالسيف إن لم تقطعه قطعك.", "author": "مثل عربي"},
    {"text": "النجاح رحلة وليس محطة.", "author": "مجهول"},
    {"text": "العبرة بالنهاية لا بالبداية.", "author": "مجهول"},
    {"text": "ابتسم، فالحياة أجمل بابتسامتك.", "author": "مجهول"},
    {"text": "من توكل على الله فهو حسبه.", "author": "آية قرآنية"},
    {"text": "كل بداية صعبة، ولكن المثابرة تصنع النجاح.", "author": "مجهول"},
]
