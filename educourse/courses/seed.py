"""Sample catalog bundled with the mobile app.

Loaded into an empty database when ``DATABASE_SEED_SAMPLE_DATA`` is enabled.
Lesson 4 belongs to modules 1 and 2, and module 1 to courses 1, 3 and 6.
"""

from typing import Any

import structlog
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from educourse.courses.models import (
    Course,
    Lesson,
    LessonType,
    Module,
    courses_modules,
    modules_lessons,
)


logger = structlog.get_logger(__name__)

_VIDEO = LessonType.VIDEO.value
_TEXT = LessonType.TEXT.value

SAMPLE_LESSONS: list[dict[str, Any]] = [
    {"id": 1, "title": "Introdução ao bem-estar", "type": _VIDEO, "duration": "12 min",
     "description": "Uma introdução aos princípios básicos de bem-estar e como eles afetam sua vida diária."},
    {"id": 2, "title": "Hábitos alimentares saudáveis", "type": _VIDEO, "duration": "15 min",
     "description": "Aprenda como desenvolver hábitos alimentares que promovem saúde e bem-estar."},
    {"id": 3, "title": "Exercícios para iniciantes", "type": _VIDEO, "duration": "20 min",
     "description": "Rotina básica de exercícios que qualquer pessoa pode começar independente do nível de condicionamento."},
    {"id": 4, "title": "Técnicas de respiração", "type": _TEXT, "duration": "8 min",
     "description": "Guia detalhado sobre técnicas de respiração para reduzir o estresse e melhorar o foco."},
    {"id": 5, "title": "Meditação guiada", "type": _VIDEO, "duration": "10 min",
     "description": "Sessão de meditação guiada para iniciantes focada em atenção plena."},
    {"id": 6, "title": "Estratégias de foco", "type": _VIDEO, "duration": "18 min",
     "description": "Como treinar seu cérebro para manter o foco mesmo em ambientes desafiadores."},
    {"id": 7, "title": "Técnicas de produtividade", "type": _TEXT, "duration": "12 min",
     "description": "Métodos comprovados para aumentar sua produtividade no trabalho e estudos."},
    {"id": 8, "title": "Gerenciamento de tempo", "type": _VIDEO, "duration": "14 min",
     "description": "Aprenda a organizar seu tempo de forma eficiente para alcançar seus objetivos."},
    {"id": 9, "title": "Hábitos para um cérebro saudável", "type": _VIDEO, "duration": "22 min",
     "description": "Rotinas diárias que melhoram a saúde do cérebro e ajudam a prevenir o declínio cognitivo."},
    {"id": 10, "title": "Nutrição para o cérebro", "type": _TEXT, "duration": "15 min",
     "description": "Alimentos e suplementos que ajudam a otimizar a função cerebral."},
    {"id": 11, "title": "Estudo de caso: Alta performance", "type": _VIDEO, "duration": "25 min",
     "description": "Análise detalhada de como pessoas de alta performance mantêm seu foco e energia."},
    {"id": 12, "title": "Exercícios para memória", "type": _VIDEO, "duration": "16 min",
     "description": "Atividades práticas para fortalecer sua memória e capacidade de retenção.",
     "locked": True},
]

SAMPLE_MODULES: list[dict[str, Any]] = [
    {"id": 1, "title": "Fundamentos de Bem-Estar", "order": 1, "duration": "55 min",
     "description": "Aprenda os conceitos básicos de bem-estar e como eles afetam todos os aspectos da sua vida."},
    {"id": 2, "title": "Práticas Diárias", "order": 2, "duration": "30 min",
     "description": "Técnicas e práticas que você pode incorporar no seu dia a dia para melhorar seu bem-estar."},
    {"id": 3, "title": "Produtividade e Foco", "order": 1, "duration": "44 min",
     "description": "Como otimizar seu desempenho mental e manter o foco em tarefas importantes."},
    {"id": 4, "title": "Saúde Cerebral", "order": 2, "duration": "78 min",
     "description": "Entenda como manter seu cérebro saudável e funcionando em seu potencial máximo."},
]

_PEXELS = "https://images.pexels.com/photos/{0}/pexels-photo-{0}.jpeg?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=2"

SAMPLE_COURSES: list[dict[str, Any]] = [
    {"id": 1, "title": "Bem Estar com o Dr. Jô", "instructor": "Dr. Jô Furlan",
     "category": "Saúde", "image_url": _PEXELS.format(3683074), "duration": "1h 25min",
     "featured": True, "in_progress": True,
     "description": "Um curso completo sobre bem-estar físico e mental, projetado para ajudar você a viver uma vida mais saudável e equilibrada. Aprenda práticas diárias, hábitos alimentares e técnicas de relaxamento que transformarão sua qualidade de vida."},
    {"id": 2, "title": "Cérebro de Resultados", "instructor": "Dr. Jô Furlan",
     "category": "Produtividade", "image_url": _PEXELS.format(3760790), "duration": "2h 02min",
     "featured": True, "in_progress": False,
     "description": "Descubra como otimizar o funcionamento do seu cérebro para alcançar resultados extraordinários em todas as áreas da sua vida. Este curso combina neurociência de ponta com técnicas práticas para melhorar foco, memória e produtividade."},
    {"id": 3, "title": "Nutrição Inteligente", "instructor": "Dra. Ana Silva",
     "category": "Saúde", "image_url": _PEXELS.format(1640770), "duration": "1h 45min",
     "featured": False, "in_progress": True,
     "description": "Aprenda a fazer escolhas alimentares conscientes que nutrem seu corpo e mente. Este curso vai além das dietas da moda para ensinar princípios fundamentais de nutrição para saúde duradoura."},
    {"id": 4, "title": "Meditação para Iniciantes", "instructor": "Pedro Santos",
     "category": "Bem-estar", "image_url": _PEXELS.format(3759661), "duration": "55min",
     "featured": True, "in_progress": False,
     "description": "Um guia passo a passo para começar sua jornada na meditação. Aprenda técnicas simples mas poderosas para acalmar a mente, reduzir o estresse e aumentar sua presença no momento presente."},
    {"id": 5, "title": "Produtividade Máxima", "instructor": "Mariana Costa",
     "category": "Produtividade", "image_url": _PEXELS.format(7147664), "duration": "1h 30min",
     "featured": False, "in_progress": False,
     "description": "Transforme sua eficiência e realize mais em menos tempo. Este curso apresenta sistemas testados e comprovados para gerenciar seu tempo, energia e atenção de forma estratégica."},
    {"id": 6, "title": "Sono Reparador", "instructor": "Dr. Carlos Mendes",
     "category": "Saúde", "image_url": _PEXELS.format(6069773), "duration": "1h 15min",
     "featured": False, "in_progress": False,
     "description": "Descubra os segredos para um sono profundo e restaurador. Aprenda como otimizar seu ambiente, rotinas e hábitos para melhorar a qualidade do sono e despertar revigorado todos os dias."},
]

SAMPLE_MODULE_LESSONS: dict[int, list[int]] = {
    1: [1, 2, 3, 4],
    2: [5, 4],
    3: [6, 7, 8],
    4: [9, 10, 11, 12],
}

SAMPLE_COURSE_MODULES: dict[int, list[int]] = {
    1: [1, 2],
    2: [3, 4],
    3: [1],
    4: [2],
    5: [3],
    6: [1],
}


async def seed_sample_catalog(session: AsyncSession) -> bool:
    """Insert the sample catalog unless courses already exist.

    Returns:
        True if the catalog was inserted
    """
    existing = await session.scalar(select(func.count()).select_from(Course))
    if existing:
        logger.info("sample_catalog_skipped", existing_courses=existing)
        return False

    session.add_all(Lesson(**row) for row in SAMPLE_LESSONS)
    session.add_all(Module(**row) for row in SAMPLE_MODULES)
    session.add_all(Course(**row) for row in SAMPLE_COURSES)
    await session.flush()

    await session.execute(
        insert(modules_lessons),
        [
            {"module_id": module_id, "lesson_id": lesson_id}
            for module_id, lesson_ids in SAMPLE_MODULE_LESSONS.items()
            for lesson_id in lesson_ids
        ],
    )
    await session.execute(
        insert(courses_modules),
        [
            {"course_id": course_id, "module_id": module_id}
            for course_id, module_ids in SAMPLE_COURSE_MODULES.items()
            for module_id in module_ids
        ],
    )
    await session.commit()

    logger.info(
        "sample_catalog_seeded",
        courses=len(SAMPLE_COURSES),
        modules=len(SAMPLE_MODULES),
        lessons=len(SAMPLE_LESSONS),
    )
    return True
