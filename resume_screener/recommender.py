# recommender.py
from typing import Dict, List

from .models import RoleRecommendation, round_half_up

ROLE_SKILLS: Dict[str, List[str]] = {
    "Frontend Developer": ["JavaScript", "TypeScript", "React", "Angular", "Vue.js", "HTML", "CSS"],
    "Backend Developer": ["Node.js", "Python", "Java", "PHP", "Django", "Flask", "Spring", "Express", "SQL"],
    "Full Stack Developer": ["JavaScript", "React", "Node.js", "Express", "MongoDB", "SQL", "HTML", "CSS"],
    "DevOps Engineer": ["Docker", "Kubernetes", "AWS", "Azure", "Jenkins", "Git"],
    "Data Scientist": ["Python", "SQL", "Pandas", "Machine Learning"],
    "Database Administrator": ["SQL", "MySQL", "PostgreSQL", "MongoDB", "Redis"],
    "QA Engineer": ["Selenium", "Java", "Python", "Jenkins", "Git"],
    "UI/UX Designer": ["Figma", "Photoshop", "HTML", "CSS"],
}

MAX_PERCENT = 95
MATCH_BONUS = 10
MAX_RECOMMENDATIONS = 3

FALLBACK_WITH_SKILLS = RoleRecommendation(role="Software Developer", percent=60)
FALLBACK_WITHOUT_SKILLS = RoleRecommendation(role="General Candidate", percent=40)


def _skill_matches(candidate_skill: str, role_skill: str) -> bool:
    a, b = candidate_skill.lower(), role_skill.lower()
    return a in b or b in a


def match_percent(skills: List[str], role_skills: List[str]) -> int:
    """Share of a role's skills covered by the candidate, plus a flat bonus, capped."""
    skills = [s for s in skills if s and s.strip()]
    matched = sum(1 for rs in role_skills if any(_skill_matches(s, rs) for s in skills))
    if matched == 0 or not role_skills:
        return 0
    return min(MAX_PERCENT, round_half_up(matched / len(role_skills) * 100) + MATCH_BONUS)


def recommend_roles(skills: List[str]) -> List[RoleRecommendation]:
    skills = [s.strip() for s in skills or [] if s and s.strip()]
    if not skills:
        return [RoleRecommendation(FALLBACK_WITHOUT_SKILLS.role, FALLBACK_WITHOUT_SKILLS.percent)]

    scored = []
    for role, role_skills in ROLE_SKILLS.items():
        percent = match_percent(skills, role_skills)
        if percent > 0:
            scored.append(RoleRecommendation(role=role, percent=percent))

    if not scored:
        return [RoleRecommendation(FALLBACK_WITH_SKILLS.role, FALLBACK_WITH_SKILLS.percent)]

    scored.sort(key=lambda r: r.percent, reverse=True)
    return scored[:MAX_RECOMMENDATIONS]
