"""Starter skill dictionary loaded into an empty store.

Canonical names are lowercase; variations are the spellings commonly found
in job descriptions and resumes.
"""

import logging

from models.schemas.layers import ALL_LAYERS
from services.skill_dictionary import SkillDictionary

logger = logging.getLogger(__name__)

# layer -> canonical skill -> variations
SEED_SKILLS: dict[str, dict[str, tuple[str, ...]]] = {
    "frontend": {
        # Frameworks
        "react": ("reactjs", "react.js"),
        "vue": ("vuejs", "vue.js"),
        "angular": ("angularjs",),
        "svelte": ("sveltejs",),
        "next.js": ("nextjs",),
        "nuxt.js": ("nuxtjs",),
        # State management
        "redux": ("redux-toolkit", "rtk"),
        "mobx": (),
        "zustand": (),
        # Languages and styling
        "javascript": ("js", "ecmascript", "es6"),
        "typescript": ("ts",),
        "html": ("html5",),
        "css": ("css3",),
        "tailwind": ("tailwindcss",),
        "sass": ("scss",),
        "material-ui": ("mui", "material ui"),
        # Tooling and testing
        "webpack": (),
        "vite": (),
        "jest": (),
        "cypress": (),
        "playwright": (),
        # Mobile
        "react-native": ("rn",),
        "flutter": (),
    },
    "backend": {
        "node.js": ("nodejs", "node"),
        "express": ("express.js", "expressjs"),
        "nestjs": ("nest.js",),
        "python": (),
        "django": (),
        "flask": (),
        "fastapi": (),
        "java": (),
        "spring-boot": ("springboot", "spring boot"),
        "c#": ("csharp", "c-sharp"),
        ".net": ("dotnet", "asp.net"),
        "go": ("golang",),
        "rust": (),
        "php": (),
        "laravel": (),
        "ruby": (),
        "rails": ("ruby-on-rails", "ror"),
        "kotlin": (),
        # APIs and messaging
        "rest": ("restful", "rest-api"),
        "graphql": (),
        "grpc": (),
        "rabbitmq": (),
        "kafka": ("apache-kafka",),
    },
    "database": {
        "postgresql": ("postgres", "psql"),
        "mysql": (),
        "sqlite": (),
        "sql-server": ("mssql",),
        "oracle": ("oracle-db",),
        "mongodb": ("mongo",),
        "dynamodb": ("aws-dynamodb",),
        "cassandra": (),
        "redis": (),
        "elasticsearch": ("elastic",),
        "snowflake": (),
        "bigquery": ("google-bigquery",),
        "redshift": ("aws-redshift",),
    },
    "cloud": {
        "aws": ("amazon-web-services",),
        "ec2": ("aws-ec2",),
        "s3": ("aws-s3",),
        "lambda": ("aws-lambda",),
        "sqs": ("aws-sqs",),
        "azure": ("microsoft-azure",),
        "azure-functions": (),
        "gcp": ("google-cloud-platform", "google-cloud"),
        "cloud-run": (),
        "vercel": (),
        "heroku": (),
    },
    "devops": {
        "docker": (),
        "kubernetes": ("k8s",),
        "helm": (),
        "terraform": (),
        "ansible": (),
        "github-actions": ("gh-actions",),
        "gitlab-ci": (),
        "jenkins": (),
        "argo-cd": ("argocd",),
        "grafana": (),
        "datadog": (),
        "git": (),
    },
    "others": {
        "pytorch": (),
        "tensorflow": (),
        "scikit-learn": ("sklearn",),
        "pandas": (),
        "spark": ("apache-spark", "pyspark"),
        "airflow": ("apache-airflow",),
        "agile": ("scrum",),
        "jira": (),
    },
}


def build_seed_dictionary(version: str) -> SkillDictionary:
    dictionary = SkillDictionary.create(version)
    for layer in ALL_LAYERS:
        for name, variations in SEED_SKILLS[layer].items():
            dictionary.add_canonical_skill(name, layer)
            for variation in variations:
                dictionary.add_skill_variation(variation, name)

    logger.info(
        "Built seed dictionary %s: %d skills, %d variations",
        version,
        len(dictionary.get_all_skills()),
        len(dictionary.get_all_variations()),
    )
    return dictionary
