from typing import Final, Tuple

DEFAULT_DEPARTMENT: Final[str] = "Other"
COMPLETED_DEPARTMENT: Final[str] = "Completed Items"

# Field names the meal generator has used for a meal's ingredient list.
INGREDIENT_FIELDS: Final[Tuple[str, ...]] = ("ingredients", "mainIngredients", "main_ingredients")

PLAIN_TEXT_TITLE: Final[str] = "MY GROCERY LIST"
BULLET: Final[str] = "•"

# Ordered (department, keywords) table. The first department with a keyword
# contained in the lowercased item name wins, so declaration order is priority:
#   Household before Condiments  -> "aluminum foil" is not "oil"
#   Canned before Meat           -> "chicken broth" is canned
#   Condiments before Dairy      -> "peanut butter" is not dairy
#   Dairy before Spices          -> "unsalted butter" is not "salt"
#   Spices before Produce        -> "onion powder" is a spice, "onion" is produce
#   Meat before Beverages        -> "steak" is not "tea"
DEPARTMENT_TAXONOMY: Final[Tuple[Tuple[str, Tuple[str, ...]], ...]] = (
    ("Household", (
        "paper towel", "toilet paper", "aluminum foil", "foil", "plastic wrap", "parchment",
        "dish soap", "soap", "detergent", "trash bag", "napkin", "sponge",
    )),
    ("Frozen Foods", (
        "frozen", "ice cream", "popsicle",
    )),
    ("Bakery", (
        "bread", "tortillas", "bagel", "baguette", "pita", "croissant", "buns", "muffin",
        "english muffin", "naan",
    )),
    ("Canned Goods", (
        "canned", "tomato paste", "tomato sauce", "diced tomatoes", "crushed tomatoes",
        "broth", "stock", "soup", "coconut milk", "black beans", "kidney beans", "pinto beans",
        "refried beans", "chickpeas", "garbanzo",
    )),
    ("Condiments & Sauces", (
        "soy sauce", "fish sauce", "hot sauce", "sauce", "ketchup", "mustard", "mayo",
        "vinegar", "salsa", "dressing", "peanut butter", "jam", "honey", "syrup", "oil",
        "pesto", "sriracha",
    )),
    ("Dairy & Eggs", (
        "milk", "cheese", "cheddar", "mozzarella", "parmesan", "feta", "butter", "cream",
        "yogurt", "eggs", "egg yolk", "egg white",
    )),
    ("Spices & Herbs", (
        "onion powder", "garlic powder", "chili powder", "curry powder", "salt",
        "black pepper", "peppercorn", "pepper flakes", "cayenne", "paprika", "cumin",
        "oregano", "thyme", "rosemary", "bay lea", "cinnamon", "nutmeg", "turmeric",
        "seasoning", "spice",
    )),
    ("Meat & Seafood", (
        "beef", "chicken", "pork", "turkey", "sausage", "bacon", "lamb", "steak",
        "fish", "salmon", "tuna", "cod", "shrimp", "prawn", "crab",
    )),
    ("Pantry Staples", (
        "rice", "pasta", "spaghetti", "penne", "noodle", "flour", "sugar", "oats", "quinoa",
        "baking", "yeast", "cornstarch", "lentil", "cereal", "vanilla", "chocolate chips",
        "couscous",
    )),
    ("Snacks", (
        "chips", "crackers", "pretzel", "popcorn", "cookie", "granola bar", "nuts",
    )),
    ("Produce", (
        "onion", "garlic", "tomato", "bell pepper", "jalapeno", "chile", "lettuce", "spinach",
        "kale", "cabbage", "carrot", "potato", "broccoli", "cauliflower", "celery", "cucumber",
        "zucchini", "eggplant", "mushroom", "avocado", "lemon", "lime", "apple", "banana",
        "orange", "berries", "cilantro", "parsley", "basil", "ginger", "scallion",
        "green onion", "green beans", "corn", "squash",
    )),
    ("Beverages", (
        "juice", "coffee", "tea", "soda", "sparkling water", "water", "wine", "beer",
    )),
)
