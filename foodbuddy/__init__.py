"""FoodBuddy ingredient analysis backend."""
