"""Deterministic content used when the LLM is unavailable.

Roadmaps come in three tracks (web, data, generic) chosen by keywords in the
learner's career goal, each with three levels. Level 1 is the first roadmap a
learner gets; each completed roadmap unlocks the next level, and the last
level repeats once reached.
"""

import re
from datetime import date, timedelta

from learnpath.schemas.profile import LearnerProfile
from learnpath.schemas.roadmap import RoadmapContent, RoadmapStepSchema
from learnpath.schemas.study_plan import DailyPlans, DailyTask, StudyPlan

WEB_KEYWORDS = ("web", "frontend", "backend", "full stack", "fullstack")
DATA_KEYWORDS = ("data", "ai", "learning", "machine")

LEVEL_SUFFIXES = ("Foundations", "Intermediate", "Advanced")

DEFAULT_CAREER_GOALS = {
    "web": "Web Developer",
    "data": "Data Scientist",
    "generic": "Software Developer",
}


def _step(
    number: int,
    title: str,
    description: str,
    duration: str,
    skills: list[str],
    resources: list[tuple[str, str, str]],
    milestones: list[str],
) -> dict:
    return {
        "id": f"step-{number}",
        "title": title,
        "description": description,
        "duration": duration,
        "skills": skills,
        "resources": [
            {"title": r_title, "type": r_type, "description": r_desc}
            for r_title, r_type, r_desc in resources
        ],
        "milestones": milestones,
    }


WEB_LEVELS: list[dict] = [
    {
        "overview": "Learn how the web works and build responsive, interactive sites with HTML, CSS and JavaScript.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "HTML & CSS Fundamentals",
                  "Structure pages with semantic HTML and style them with modern CSS, Flexbox and Grid.",
                  "4 Weeks", ["HTML5", "CSS3", "Flexbox", "Responsive Design"],
                  [("MDN Learn Web Development", "documentation", "The reference guide to web basics."),
                   ("freeCodeCamp Responsive Web Design", "course", "Hands-on certification course.")],
                  ["Build a personal landing page", "Make a layout that works on mobile"]),
            _step(2, "JavaScript Essentials",
                  "Learn variables, functions, the DOM, events and asynchronous JavaScript.",
                  "5 Weeks", ["JavaScript", "DOM", "Events", "Fetch API"],
                  [("javascript.info", "tutorial", "Modern JavaScript tutorial."),
                   ("Eloquent JavaScript", "book", "A thorough introduction to the language.")],
                  ["Build an interactive to-do app", "Consume a public REST API"]),
            _step(3, "Frontend Framework Basics",
                  "Build component-based user interfaces with React and manage state.",
                  "5 Weeks", ["React", "Components", "State Management", "Git"],
                  [("React Official Docs", "documentation", "Learn React from its authors."),
                   ("Scrimba Learn React", "course", "Interactive React course.")],
                  ["Ship a multi-page React app", "Publish your code on GitHub"]),
        ],
    },
    {
        "overview": "Add backend development, databases and API design to become a full-stack developer.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "Node.js & Express Backend",
                  "Build server-side applications with Node.js and Express, including REST API design, middleware and authentication.",
                  "5 Weeks", ["Node.js", "Express", "REST APIs", "Authentication"],
                  [("Node.js Official Docs", "documentation", "Complete Node.js guide."),
                   ("The Odin Project - NodeJS", "course", "Full-stack JavaScript curriculum.")],
                  ["Build a REST API with CRUD operations", "Implement JWT authentication"]),
            _step(2, "Databases & ORM",
                  "Work with relational and document databases: SQL, PostgreSQL, MongoDB and an ORM.",
                  "4 Weeks", ["SQL", "PostgreSQL", "MongoDB", "ORM"],
                  [("SQLBolt", "tutorial", "Interactive SQL lessons."),
                   ("PostgreSQL Tutorial", "documentation", "Practical PostgreSQL guide.")],
                  ["Design a normalized database schema", "Connect a backend to a database"]),
            _step(3, "Full-Stack Project & Deployment",
                  "Combine frontend and backend skills to build and deploy a production-ready application.",
                  "6 Weeks", ["Next.js", "Deployment", "CI/CD", "Docker Basics"],
                  [("Vercel Deployment Guide", "documentation", "Deploy web apps to production.")],
                  ["Deploy a full-stack app to production", "Set up a CI/CD pipeline"]),
        ],
    },
    {
        "overview": "Master system design, performance, testing strategy and cloud infrastructure.",
        "estimatedTimeframe": "4-5 Months",
        "steps": [
            _step(1, "System Design & Architecture",
                  "Design scalable systems with microservices, caching, load balancing and message queues.",
                  "6 Weeks", ["System Design", "Microservices", "Caching", "Message Queues"],
                  [("System Design Primer", "documentation", "Learn system design concepts.")],
                  ["Design a scalable e-commerce system", "Implement a caching layer"]),
            _step(2, "Testing & Quality Assurance",
                  "Apply unit, integration and end-to-end testing, and practice test-driven development.",
                  "4 Weeks", ["Unit Testing", "E2E Testing", "TDD", "Integration Testing"],
                  [("Testing JavaScript", "course", "Comprehensive testing guide.")],
                  ["Reach 80%+ test coverage on a project", "Add end-to-end tests"]),
            _step(3, "Cloud & DevOps Essentials",
                  "Deploy and operate applications on a cloud platform with containers and orchestration.",
                  "6 Weeks", ["AWS", "Docker", "Kubernetes", "Monitoring"],
                  [("AWS Free Tier", "documentation", "Hands-on cloud experience.")],
                  ["Deploy a containerized application", "Set up monitoring and alerting"]),
            _step(4, "Portfolio & Interview Prep",
                  "Polish a portfolio, practice system design interviews and prepare for technical assessments.",
                  "4 Weeks", ["Portfolio", "Interview Prep", "DSA Review", "Behavioral"],
                  [("LeetCode", "tutorial", "Practice coding problems.")],
                  ["Complete a portfolio website", "Solve 100 practice problems"]),
        ],
    },
]

DATA_LEVELS: list[dict] = [
    {
        "overview": "Build the programming, statistics and data-wrangling foundations every data role needs.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "Python for Data",
                  "Learn Python syntax, data structures and the notebook workflow.",
                  "4 Weeks", ["Python", "Jupyter", "Functions", "Data Structures"],
                  [("Python Official Tutorial", "documentation", "The language from its maintainers."),
                   ("Python for Everybody", "course", "Beginner-friendly Python course.")],
                  ["Write 20 small Python scripts", "Publish a notebook on GitHub"]),
            _step(2, "Statistics & Probability",
                  "Understand distributions, hypothesis testing and descriptive statistics.",
                  "4 Weeks", ["Statistics", "Probability", "Hypothesis Testing", "Linear Algebra Basics"],
                  [("Khan Academy Statistics", "course", "Core statistics concepts."),
                   ("Think Stats", "book", "Statistics for programmers.")],
                  ["Run a hypothesis test on a real dataset", "Explain a confidence interval"]),
            _step(3, "Data Analysis & Visualization",
                  "Clean, analyze and visualize data with pandas and plotting libraries.",
                  "5 Weeks", ["pandas", "NumPy", "Matplotlib", "SQL"],
                  [("Kaggle Learn Pandas", "tutorial", "Short practical pandas lessons."),
                   ("pandas Documentation", "documentation", "User guide and API reference.")],
                  ["Complete an exploratory analysis project", "Build a dashboard of key metrics"]),
        ],
    },
    {
        "overview": "Advance into machine learning, statistical modeling and real-world data projects.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "Machine Learning Fundamentals",
                  "Learn supervised and unsupervised algorithms, model evaluation and scikit-learn.",
                  "6 Weeks", ["Scikit-learn", "Regression", "Classification", "Clustering"],
                  [("Andrew Ng's ML Course", "course", "The classic machine learning course.")],
                  ["Build 3 ML models on real datasets", "Reach 90%+ accuracy on a classification task"]),
            _step(2, "Deep Learning & Neural Networks",
                  "Explore deep learning with PyTorch: CNNs, RNNs and transfer learning.",
                  "8 Weeks", ["PyTorch", "CNNs", "RNNs", "Transfer Learning"],
                  [("Fast.ai", "course", "Practical deep learning for coders.")],
                  ["Build an image classifier", "Train a text generation model"]),
            _step(3, "Data Engineering & MLOps",
                  "Deploy models, build data pipelines and manage ML workflows in production.",
                  "5 Weeks", ["MLOps", "Data Pipelines", "Model Deployment", "MLflow"],
                  [("Made With ML", "course", "MLOps best practices.")],
                  ["Deploy an ML model as an API", "Build an automated data pipeline"]),
        ],
    },
    {
        "overview": "Master NLP, computer vision and production ML systems.",
        "estimatedTimeframe": "4-5 Months",
        "steps": [
            _step(1, "Natural Language Processing",
                  "Work with transformers and pretrained language models to build text applications.",
                  "6 Weeks", ["NLP", "Transformers", "Hugging Face", "Text Classification"],
                  [("Hugging Face Course", "course", "NLP with transformers.")],
                  ["Build a sentiment analyzer", "Fine-tune a language model"]),
            _step(2, "Computer Vision",
                  "Learn image processing, object detection, segmentation and generative models.",
                  "6 Weeks", ["OpenCV", "Object Detection", "GANs", "Image Segmentation"],
                  [("PyImageSearch", "tutorial", "Computer vision tutorials.")],
                  ["Build an object detection system", "Create a style transfer application"]),
            _step(3, "Portfolio & Kaggle Competitions",
                  "Build a data science portfolio and sharpen skills in competitions.",
                  "6 Weeks", ["Kaggle", "Portfolio", "Feature Engineering", "Ensemble Methods"],
                  [("Kaggle", "tutorial", "Data science competitions.")],
                  ["Complete 3 Kaggle competitions", "Publish a portfolio with 5+ projects"]),
        ],
    },
]

GENERIC_LEVELS: list[dict] = [
    {
        "overview": "Learn to program, think in algorithms and use the everyday tools of software development.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "Programming Fundamentals",
                  "Learn variables, control flow, functions and debugging in a beginner-friendly language.",
                  "5 Weeks", ["Python", "Control Flow", "Functions", "Debugging"],
                  [("CS50x", "course", "Harvard's introduction to computer science."),
                   ("Automate the Boring Stuff", "book", "Practical programming for beginners.")],
                  ["Write a command-line game", "Solve 30 beginner exercises"]),
            _step(2, "Data Structures & Algorithms Basics",
                  "Understand arrays, hash maps, recursion, sorting and complexity.",
                  "5 Weeks", ["Data Structures", "Algorithms", "Big-O", "Recursion"],
                  [("Grokking Algorithms", "book", "An illustrated guide to algorithms."),
                   ("VisuAlgo", "tutorial", "Visualized data structures.")],
                  ["Implement a hash map from scratch", "Solve 25 easy practice problems"]),
            _step(3, "Developer Tooling",
                  "Use Git, the command line and an editor effectively, and write your first tests.",
                  "3 Weeks", ["Git", "Command Line", "Testing Basics", "Editors"],
                  [("Pro Git", "book", "Complete Git reference."),
                   ("The Missing Semester", "course", "MIT's course on developer tools.")],
                  ["Host a project on GitHub", "Write unit tests for a small library"]),
        ],
    },
    {
        "overview": "Level up with software design, application development and collaboration practices.",
        "estimatedTimeframe": "3-4 Months",
        "steps": [
            _step(1, "Advanced Programming & Design Patterns",
                  "Apply object-oriented and functional techniques, SOLID principles and common design patterns.",
                  "5 Weeks", ["Design Patterns", "SOLID", "Functional Programming", "Clean Code"],
                  [("Refactoring Guru", "documentation", "Design patterns explained visually.")],
                  ["Implement 5 design patterns", "Refactor a codebase using SOLID principles"]),
            _step(2, "Web Development & APIs",
                  "Build full-stack web applications with a modern framework, REST APIs and a database.",
                  "6 Weeks", ["React", "Node.js", "REST APIs", "SQL"],
                  [("Full Stack Open", "course", "University of Helsinki's full-stack course.")],
                  ["Build a full-stack CRUD app", "Design and document a REST API"]),
            _step(3, "Version Control & Collaboration",
                  "Practice Git workflows, code review and open source contribution.",
                  "3 Weeks", ["Git", "GitHub", "Code Review", "Open Source"],
                  [("Pro Git", "book", "Complete Git reference.")],
                  ["Contribute to an open source project", "Use a branching strategy on a team project"]),
        ],
    },
    {
        "overview": "Prepare for senior roles with system design, cloud infrastructure and interview practice.",
        "estimatedTimeframe": "4-5 Months",
        "steps": [
            _step(1, "System Design & Architecture",
                  "Design large-scale distributed systems, microservices and cloud-native applications.",
                  "6 Weeks", ["System Design", "Distributed Systems", "Microservices", "Cloud Architecture"],
                  [("Designing Data-Intensive Applications", "book", "The definitive guide to system design.")],
                  ["Design 5 system architectures", "Build a microservices application"]),
            _step(2, "DevOps & Cloud",
                  "Use CI/CD, containers, orchestration and a cloud platform for production deployment.",
                  "5 Weeks", ["Docker", "Kubernetes", "CI/CD", "AWS/GCP"],
                  [("Docker Documentation", "documentation", "Container fundamentals.")],
                  ["Containerize and deploy an application", "Set up a CI/CD pipeline"]),
            _step(3, "DSA & Interview Preparation",
                  "Master data structures and algorithms and practice technical interviews.",
                  "8 Weeks", ["Data Structures", "Algorithms", "Dynamic Programming", "System Design Interviews"],
                  [("NeetCode", "tutorial", "Curated coding interview prep.")],
                  ["Solve 150 practice problems", "Complete 5 mock interviews"]),
            _step(4, "Portfolio & Career Launch",
                  "Build a professional portfolio, sharpen your resume and apply for roles.",
                  "4 Weeks", ["Portfolio", "Resume", "Networking", "Personal Brand"],
                  [("Tech Interview Handbook", "documentation", "Complete interview guide.")],
                  ["Launch a portfolio website", "Apply to 20+ positions"]),
        ],
    },
]

TRACKS: dict[str, list[dict]] = {
    "web": WEB_LEVELS,
    "data": DATA_LEVELS,
    "generic": GENERIC_LEVELS,
}

WEEKLY_SCHEDULES: dict[str, dict[str, str]] = {
    "web": {
        "monday": "Theory & concepts (1.5h)",
        "tuesday": "Hands-on coding (2h)",
        "wednesday": "Practice problems (1h)",
        "thursday": "Project work (2h)",
        "friday": "Code review & refactoring (1.5h)",
        "saturday": "Deep project work (3h)",
        "sunday": "Rest & planning",
    },
    "data": {
        "monday": "Theory & math foundations (1.5h)",
        "tuesday": "Hands-on coding with datasets (2h)",
        "wednesday": "Paper reading & research (1h)",
        "thursday": "Project work (2h)",
        "friday": "Model experimentation (1.5h)",
        "saturday": "Deep project work (3h)",
        "sunday": "Rest & planning",
    },
    "generic": {
        "monday": "Theory & concepts (1.5h)",
        "tuesday": "Hands-on coding (2h)",
        "wednesday": "Practice problems (1h)",
        "thursday": "Project work (2h)",
        "friday": "Code review & learning (1.5h)",
        "saturday": "Deep work session (3h)",
        "sunday": "Rest & planning",
    },
}


def select_track(career_goal: str | None) -> str:
    """Pick the template track from career-goal keywords."""
    goal = (career_goal or "").lower()
    if any(keyword in goal for keyword in WEB_KEYWORDS):
        return "web"
    words = set(re.findall(r"[a-z]+", goal))
    # "ai" only counts as a whole word ("retail" is not a data track)
    if "ai" in words or any(keyword in goal for keyword in DATA_KEYWORDS if keyword != "ai"):
        return "data"
    return "generic"


def roadmap_template(profile: LearnerProfile, level: int = 1) -> RoadmapContent:
    """Build the template roadmap for ``level`` (1-based, clamped to the last level)."""
    track = select_track(profile.career_goal)
    levels = TRACKS[track]
    index = min(max(level, 1), len(levels)) - 1
    template = levels[index]

    goal = profile.career_goal.strip() or DEFAULT_CAREER_GOALS[track]
    return RoadmapContent.model_validate(
        {
            "careerPath": f"{goal} - {LEVEL_SUFFIXES[index]}",
            "overview": template["overview"],
            "estimatedTimeframe": template["estimatedTimeframe"],
            "steps": template["steps"],
            "weeklySchedule": WEEKLY_SCHEDULES[track],
        }
    )


def next_roadmap_template(profile: LearnerProfile, completed_order: int) -> RoadmapContent:
    """Template for the roadmap that follows a completed one of ``completed_order``."""
    return roadmap_template(profile, level=completed_order + 1)


# ============================================================================
# Study plans
# ============================================================================

DEFAULT_WEEKLY_HOURS = 7.0

STYLE_ACTIVITIES = {
    "visual": ("Watch a video walkthrough on {skill}", "learning"),
    "auditory": ("Listen to a talk or podcast about {skill}", "learning"),
    "reading": ("Read the documentation chapter on {skill}", "learning"),
    "kinesthetic": ("Build a small exercise using {skill}", "practice"),
    "hands-on": ("Build a small exercise using {skill}", "practice"),
}

WEEKDAY_SLOTS = (
    ("monday", "learning"),
    ("tuesday", "practice"),
    ("wednesday", "learning"),
    ("thursday", "practice"),
    ("friday", "review"),
    ("saturday", "project"),
)


def weekly_hours(study_time: str | None) -> float:
    """Hours per week from inputs like "5-10", "8", "10+" (range midpoint)."""
    numbers = [float(n) for n in re.findall(r"\d+(?:\.\d+)?", study_time or "")]
    if not numbers:
        return DEFAULT_WEEKLY_HOURS
    if len(numbers) >= 2:
        return (numbers[0] + numbers[1]) / 2
    return numbers[0]


def _format_minutes(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    if not hours:
        return f"{rest} min"
    return f"{hours}h {rest} min" if rest else f"{hours}h"


def _task_text(task_type: str, skill: str, style: str, step_title: str) -> str:
    if task_type == "learning":
        template, _ = STYLE_ACTIVITIES.get(style, ("Study the core concepts of {skill}", "learning"))
        return template.format(skill=skill)
    if task_type == "practice":
        return f"Practice exercises on {skill}"
    if task_type == "review":
        return f"Review notes and revisit weak spots in {skill}"
    return f"Apply {skill} in a mini project for {step_title}"


def study_plan_template(
    profile: LearnerProfile,
    step: RoadmapStepSchema,
    today: date | None = None,
) -> StudyPlan:
    """Build a one-week plan for ``step`` sized to the learner's study time."""
    today = today or date.today()
    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=6)

    style = (profile.learning_style or "").strip().lower()
    skills = step.skills or [step.title]
    # Six working days share the weekly budget; Sunday is a short review
    session_minutes = max(15, int(weekly_hours(profile.study_time) * 60 / 6) // 15 * 15)

    hands_on = STYLE_ACTIVITIES.get(style, ("", "learning"))[1] == "practice"

    plans: dict[str, list[DailyTask]] = {}
    for index, (day, task_type) in enumerate(WEEKDAY_SLOTS):
        skill = skills[index % len(skills)]
        if hands_on and task_type == "learning":
            task_type = "practice"
        plans[day] = [
            DailyTask(
                time="18:00",
                task=_task_text(task_type, skill, style, step.title),
                duration=_format_minutes(session_minutes),
                type=task_type,
            )
        ]
    plans["sunday"] = [
        DailyTask(
            time="10:00",
            task=f"Weekly review: summarize what you learned about {step.title}",
            duration=_format_minutes(min(session_minutes, 30)),
            type="review",
        )
    ]

    goals = [f"Make progress on: {milestone}" for milestone in step.milestones[:2]]
    goals.append(f"Get hands-on with {', '.join(skills[:3])}")

    return StudyPlan(
        week_start=week_start.isoformat(),
        week_end=week_end.isoformat(),
        focus_area=step.title,
        daily_plans=DailyPlans(**plans),
        weekly_goals=goals,
        tips=[
            "Study at the same time each day to build a habit.",
            "Write down one question after every session and answer it the next day.",
            "Mark tasks complete as you go to keep your progress up to date.",
        ],
    )
