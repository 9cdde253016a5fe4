# archimedes_prep/core/dummy_data.py
from typing import List, Dict, Any

# Day 1 diagnostic, inserted once when the catalog is empty.
# Fixture content: question 3's explanation disagrees with its correctAnswer.
DIAGNOSTIC_TEST_DAY = 1
DIAGNOSTIC_TEST_TITLE = "Diagnostic Assessment"

DIAGNOSTIC_QUESTIONS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "text": "What is the value of the expression 24 ÷ (3 ÷ 2) - (24 ÷ 3) × 2?",
        "options": ["0", "2", "8", "16", "32"],
        "correctAnswer": "0",
        "explanation": "Evaluate the left bracket: 24 ÷ 1.5 = 16. Evaluate the right bracket: 8. Multiply by 2: 16. Subtract: 16 - 16 = 0.",
        "topic": "Arithmetic"
    },
    {
        "id": 2,
        "text": "Ella answers five mathematics questions every 40 seconds. Jasleen answers six mathematics questions every 45 seconds. How many seconds longer does it take Ella to answer exactly 360 questions than Jasleen?",
        "options": ["120", "180", "240", "300", "360"],
        "correctAnswer": "180",
        "explanation": "Ella's rate: 40/5 = 8s/q. For 360q: 360*8 = 2880s. Jasleen's rate: 45/6 = 7.5s/q. For 360q: 360*7.5 = 2700s. Difference: 2880 - 2700 = 180s.",
        "topic": "Rates & Ratios"
    },
    {
        "id": 3,
        "text": "A rectangle has side lengths expressed algebraically as (3x + 6) cm and (9x - 2) cm. If the total perimeter is precisely 100 cm, what is the value of x?",
        "options": ["2", "3", "23/6", "4", "11/3"],
        "correctAnswer": "4",
        "explanation": "Half the perimeter is 50. (3x + 6) + (9x - 2) = 50. 12x + 4 = 50. 12x = 46. x = 46/12 = 23/6.",
        "topic": "Geometry"
    },
    {
        "id": 4,
        "text": "Without using long division, identify which of the following large integers is definitively divisible by 12.",
        "options": ["1,234,567,890", "5,432,109,876", "3,456,789,124", "1,111,111,114", "9,876,543,212"],
        "correctAnswer": "5,432,109,876",
        "explanation": "Rule of 12: Divisible by 3 and 4. 5,432,109,876 ends in 76 (div by 4). Sum of digits: 5+4+3+2+1+0+9+8+7+6 = 45 (div by 3).",
        "topic": "Number Sense"
    },
    {
        "id": 5,
        "text": "The mean age of a group of 5 teachers is 32 years. A new teacher joins and the mean age drops to 30 years. How old is the new teacher?",
        "options": ["20", "22", "24", "25", "28"],
        "correctAnswer": "20",
        "explanation": "Total age of 5 teachers = 5 * 32 = 160. Total age of 6 teachers = 6 * 30 = 180. New teacher = 180 - 160 = 20.",
        "topic": "Data & Stats"
    }
]

# Templates cycled by the AI service in dummy mode
DUMMY_QUESTION_TEMPLATES: List[Dict[str, Any]] = [
    {
        "text": "What is the units digit of 7 raised to the power 2024?",
        "options": ["1", "3", "7", "9", "5"],
        "correctAnswer": "1",
        "explanation": "Units digits of powers of 7 cycle 7, 9, 3, 1. 2024 is divisible by 4, so the units digit is 1.",
        "topic": "Number Sense"
    },
    {
        "text": "Evaluate 3 + 4 × (6 - 2)² ÷ 8.",
        "options": ["5", "9", "11", "14", "17"],
        "correctAnswer": "11",
        "explanation": "Brackets: 4² = 16. Then 4 × 16 = 64, 64 ÷ 8 = 8, and 3 + 8 = 11.",
        "topic": "Arithmetic"
    },
    {
        "text": "A recipe uses flour and sugar in the ratio 5 : 2. How many grams of sugar go with 350 g of flour?",
        "options": ["70", "100", "140", "175", "200"],
        "correctAnswer": "140",
        "explanation": "350 ÷ 5 = 70 grams per part, and sugar is 2 parts: 2 × 70 = 140.",
        "topic": "Rates & Ratios"
    },
    {
        "text": "Two fair dice are rolled. What is the probability that the total is 7?",
        "options": ["1/12", "1/9", "1/6", "1/4", "7/36"],
        "correctAnswer": "1/6",
        "explanation": "6 of the 36 equally likely outcomes total 7, so the probability is 6/36 = 1/6.",
        "topic": "Data & Probability"
    },
    {
        "text": "How many different three-letter arrangements can be made from the letters A, B, C and D without repetition?",
        "options": ["12", "16", "24", "36", "64"],
        "correctAnswer": "24",
        "explanation": "4 choices for the first letter, 3 for the second, 2 for the third: 4 × 3 × 2 = 24.",
        "topic": "Logic & Combinatorics"
    },
    {
        "text": "The interior angles of a regular polygon are each 140°. How many sides does it have?",
        "options": ["6", "7", "8", "9", "10"],
        "correctAnswer": "9",
        "explanation": "Each exterior angle is 180° - 140° = 40°, and 360° ÷ 40° = 9 sides.",
        "topic": "Geometry"
    }
]

DUMMY_EXPLANATION = """## {topic}

### Core concepts
A short overview of **{topic}** for competition preparation: the key definitions
and the situations where they appear in exam questions.

### Essential formulae
- Write down what is given before computing anything.
- Check units and simplify fractions at every step.

### Competitive trick
Look for invariants and patterns (for example unit digits repeating in short cycles)
before reaching for long calculations.

### Worked example
1. Restate the problem in your own words.
2. Identify which formula applies.
3. Solve, then sanity-check the answer against the options.
"""
