"""LearnHub API: skills, courses, quizzes, progress and badges."""
