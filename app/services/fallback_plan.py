"""
Deterministic template plan used whenever the model output is unusable.

Pure function of the user profile: no I/O, never fails.
"""
from app.models.plan import FitnessPlan
from app.models.profile import UserProfile


# (day, vegetarian option, other option, snack); each option is (name, ingredients, calories)
_MEAL_WEEK = [
    (
        "Monday",
        {
            "breakfast": (("Oatmeal with Berries", ["Oatmeal", "Mixed berries", "Almonds", "Greek yogurt"]),
                          ("Scrambled Eggs with Toast", ["Eggs", "Whole grain toast", "Avocado", "Spinach"]), 400),
            "lunch": (("Quinoa Salad Bowl", ["Quinoa", "Mixed vegetables", "Chickpeas", "Olive oil"]),
                      ("Grilled Chicken Salad", ["Grilled chicken", "Mixed greens", "Cherry tomatoes", "Cucumber"]), 500),
            "dinner": (("Lentil Curry", ["Red lentils", "Brown rice", "Mixed vegetables", "Coconut milk"]),
                       ("Salmon with Vegetables", ["Salmon fillet", "Sweet potato", "Broccoli", "Lemon"]), 450),
        },
        ("Healthy Snack", ["Greek yogurt", "Mixed nuts"], 200),
    ),
    (
        "Tuesday",
        {
            "breakfast": (("Smoothie Bowl", ["Banana", "Berries", "Spinach", "Almond milk", "Chia seeds"]),
                          ("Protein Pancakes", ["Protein powder", "Banana", "Eggs", "Oats"]), 380),
            "lunch": (("Veggie Wrap", ["Whole wheat wrap", "Hummus", "Vegetables", "Avocado"]),
                      ("Turkey Sandwich", ["Whole grain bread", "Turkey", "Lettuce", "Tomato"]), 450),
            "dinner": (("Vegetable Stir-fry", ["Tofu", "Mixed vegetables", "Brown rice", "Soy sauce"]),
                       ("Chicken Stir-fry", ["Chicken breast", "Mixed vegetables", "Quinoa", "Ginger"]), 520),
        },
        ("Fruit and Nuts", ["Apple", "Almonds"], 180),
    ),
    (
        "Wednesday",
        {
            "breakfast": (("Chia Pudding", ["Chia seeds", "Almond milk", "Berries", "Honey"]),
                          ("Greek Yogurt Bowl", ["Greek yogurt", "Granola", "Berries", "Honey"]), 350),
            "lunch": (("Buddha Bowl", ["Quinoa", "Roasted vegetables", "Chickpeas", "Tahini"]),
                      ("Tuna Salad", ["Tuna", "Mixed greens", "Cherry tomatoes", "Olive oil"]), 480),
            "dinner": (("Pasta Primavera", ["Whole wheat pasta", "Seasonal vegetables", "Olive oil", "Herbs"]),
                       ("Beef and Vegetables", ["Lean beef", "Sweet potato", "Green beans", "Herbs"]), 550),
        },
        ("Veggie Sticks", ["Carrots", "Hummus"], 150),
    ),
    (
        "Thursday",
        {
            "breakfast": (("Avocado Toast", ["Whole grain bread", "Avocado", "Tomato", "Hemp seeds"]),
                          ("Egg Benedict", ["English muffin", "Poached egg", "Canadian bacon", "Hollandaise"]), 420),
            "lunch": (("Lentil Soup", ["Red lentils", "Vegetables", "Vegetable broth", "Herbs"]),
                      ("Chicken Caesar Salad", ["Grilled chicken", "Romaine lettuce", "Parmesan", "Caesar dressing"]), 460),
            "dinner": (("Stuffed Bell Peppers", ["Bell peppers", "Quinoa", "Black beans", "Cheese"]),
                       ("Grilled Fish", ["White fish", "Asparagus", "Wild rice", "Lemon"]), 500),
        },
        ("Trail Mix", ["Mixed nuts", "Dried fruit"], 190),
    ),
    (
        "Friday",
        {
            "breakfast": (("Breakfast Burrito", ["Whole wheat tortilla", "Scrambled tofu", "Black beans", "Salsa"]),
                          ("Protein Smoothie", ["Protein powder", "Banana", "Peanut butter", "Milk"]), 390),
            "lunch": (("Caprese Salad", ["Fresh mozzarella", "Tomatoes", "Basil", "Balsamic"]),
                      ("Salmon Bowl", ["Grilled salmon", "Brown rice", "Edamame", "Sesame dressing"]), 470),
            "dinner": (("Eggplant Parmesan", ["Eggplant", "Marinara sauce", "Mozzarella", "Basil"]),
                       ("Pork Tenderloin", ["Pork tenderloin", "Roasted vegetables", "Quinoa", "Herbs"]), 530),
        },
        ("Protein Bar", ["Protein bar", "Water"], 200),
    ),
    (
        "Saturday",
        {
            "breakfast": (("French Toast", ["Whole grain bread", "Almond milk", "Cinnamon", "Berries"]),
                          ("Steak and Eggs", ["Lean steak", "Eggs", "Hash browns", "Vegetables"]), 450),
            "lunch": (("Falafel Plate", ["Falafel", "Hummus", "Pita", "Cucumber", "Tomato"]),
                      ("Chicken Wrap", ["Grilled chicken", "Whole wheat wrap", "Vegetables", "Sauce"]), 490),
            "dinner": (("Mushroom Risotto", ["Arborio rice", "Mushrooms", "Vegetable broth", "Parmesan"]),
                       ("Lamb Chops", ["Lamb chops", "Minted peas", "Roasted potatoes", "Rosemary"]), 580),
        },
        ("Cheese and Crackers", ["Whole grain crackers", "Cheese"], 210),
    ),
    (
        "Sunday",
        {
            "breakfast": (("Pancakes", ["Whole wheat flour", "Almond milk", "Berries", "Maple syrup"]),
                          ("Full Breakfast", ["Eggs", "Turkey bacon", "Whole grain toast", "Orange juice"]), 480),
            "lunch": (("Veggie Pizza", ["Whole wheat crust", "Vegetables", "Cheese", "Herbs"]),
                      ("Grilled Chicken Pizza", ["Whole wheat crust", "Grilled chicken", "Vegetables", "Cheese"]), 520),
            "dinner": (("Vegetable Curry", ["Mixed vegetables", "Coconut milk", "Curry spices", "Basmati rice"]),
                       ("Roast Chicken", ["Roast chicken", "Roasted vegetables", "Mashed potatoes", "Gravy"]), 560),
        },
        ("Smoothie", ["Fruits", "Yogurt", "Honey"], 220),
    ),
]

FALLBACK_TIPS = [
    "Stay hydrated by drinking at least 8 glasses of water daily",
    "Get 7-9 hours of quality sleep for optimal recovery",
    "Listen to your body and rest when you feel overly fatigued",
    "Progress gradually - consistency is more important than intensity",
]


def _exercise(name, sets, reps, rest, instructions) -> dict:
    return {"name": name, "sets": sets, "reps": reps, "restTime": rest, "instructions": instructions}


def _weekly_schedule(level: str, location: str) -> list[dict]:
    beginner = level == "beginner"
    gym = "gym" in location

    return [
        {
            "day": "Monday",
            "exercises": [
                _exercise("Warm-up Walk", 1, "5-10 minutes", "N/A",
                          "Start with a gentle walk to warm up your muscles"),
                _exercise(
                    "Treadmill" if gym else "Bodyweight Squats",
                    3,
                    "8-12" if beginner else "12-15",
                    "60 seconds",
                    "Maintain steady pace, adjust incline as needed" if gym
                    else "Keep feet shoulder-width apart, lower until thighs parallel to ground",
                ),
            ],
            "duration": "30 minutes",
            "notes": "Focus on proper form and listen to your body",
        },
        {
            "day": "Tuesday",
            "exercises": [
                _exercise(
                    "Upper Body Workout", 3, "8-10" if beginner else "10-12", "60 seconds",
                    "Use dumbbells or machines for chest and arms" if gym
                    else "Push-ups, tricep dips using chair",
                ),
            ],
            "duration": "35 minutes",
            "notes": "Focus on upper body strength",
        },
        {
            "day": "Wednesday",
            "exercises": [
                _exercise(
                    "Cardio Day", 1, "20-30 minutes", "N/A",
                    "Treadmill, elliptical, or bike" if gym
                    else "Brisk walk, jogging, or jumping jacks",
                ),
            ],
            "duration": "30 minutes",
            "notes": "Maintain steady heart rate",
        },
        {
            "day": "Thursday",
            "exercises": [
                _exercise("Lower Body Workout", 3, "8-10" if beginner else "12-15", "60 seconds",
                          "Squats, lunges, and calf raises"),
            ],
            "duration": "35 minutes",
            "notes": "Focus on leg strength and stability",
        },
        {
            "day": "Friday",
            "exercises": [
                _exercise("Full Body Circuit", 2, "10-12 each exercise", "45 seconds",
                          "Combine upper and lower body movements"),
            ],
            "duration": "40 minutes",
            "notes": "High energy, full body engagement",
        },
        {
            "day": "Saturday",
            "exercises": [
                _exercise("Active Recovery", 1, "20-30 minutes", "N/A",
                          "Yoga, stretching, or light walk"),
            ],
            "duration": "20 minutes",
            "notes": "Gentle movement for recovery",
        },
        {
            "day": "Sunday",
            "exercises": [
                _exercise("Rest Day", 0, "Complete rest", "N/A",
                          "Focus on hydration and meal prep"),
            ],
            "duration": "0 minutes",
            "notes": "Complete rest and preparation for next week",
        },
    ]


def _daily_meals(preference: str) -> list[dict]:
    vegetarian = preference == "vegetarian"
    days = []

    for day, slots, (snack_name, snack_ingredients, snack_calories) in _MEAL_WEEK:
        entry = {"day": day}
        for slot, (veg, other, calories) in slots.items():
            name, ingredients = veg if vegetarian else other
            entry[slot] = {"name": name, "ingredients": list(ingredients), "calories": calories}
        entry["snacks"] = {
            "name": snack_name,
            "ingredients": list(snack_ingredients),
            "calories": snack_calories,
        }
        days.append(entry)

    return days


def create_fallback_plan(profile: UserProfile) -> FitnessPlan:
    """
    Build the template plan for a profile.

    Workouts vary only by fitness level (reps) and workout location
    (gym vs. elsewhere); meals vary only by dietary preference.
    """
    goal = (profile.fitnessGoal or "").lower()
    level = profile.fitnessLevel or ""
    location = (profile.workoutLocation or "").lower()
    preference = profile.dietaryPreference or ""

    return FitnessPlan.model_validate({
        "workoutPlan": {
            "overview": f"A personalized {level} level workout plan designed for {goal} at {location}.",
            "weeklySchedule": _weekly_schedule(level, location),
        },
        "dietPlan": {
            "overview": f"A balanced {preference} diet plan supporting your {goal} goals.",
            "dailyCalories": 1800 if "loss" in goal else 2200,
            "macros": {"protein": "25%", "carbs": "45%", "fats": "30%"},
            "dailyMeals": _daily_meals(preference),
        },
        "tips": list(FALLBACK_TIPS),
        "motivation": (
            f"Hi {profile.name}! Your {goal} journey starts now. Remember, every expert "
            "was once a beginner. Stay consistent, be patient with yourself, and "
            "celebrate small victories along the way. You've got this! 💪"
        ),
    })
