"""Static form catalogue: every step, every field, every task definition.

Labels and helper texts are user-facing and written in Bahasa Indonesia, the
form's default language.  Field ids are the stable keys used by the API, the
extraction schemas and the generation payload.
"""

from __future__ import annotations

from metaprompt.tasks.fields import (
    TASK_TYPE_FIELD,
    ChoiceOption,
    FieldDescriptor,
    FieldKind,
    StepDescriptor,
    TaskType,
    VisibilityRule,
)
from metaprompt.tasks.registry import TaskDefinition

_LEVELS = ("rendah", "sedang", "tinggi")


def _for_task(task_type: TaskType) -> VisibilityRule:
    return VisibilityRule(depends_on=TASK_TYPE_FIELD, required_value=task_type.value)


TASK_STEP = StepDescriptor(
    id="task",
    title="Jenis Tugas",
    fields=(
        FieldDescriptor(
            id=TASK_TYPE_FIELD,
            label="Apa yang ingin Anda buat?",
            kind=FieldKind.BUTTONS,
            required=True,
            options=(
                ChoiceOption(
                    TaskType.DOCUMENT.value,
                    "Dokumen",
                    "SOP, riset brief, laporan, skrip presentasi",
                ),
                ChoiceOption(
                    TaskType.AGENT.value,
                    "Agen Otonom",
                    "Spesifikasi agen AI yang bekerja mandiri dengan alat",
                ),
                ChoiceOption(
                    TaskType.APPLICATION.value,
                    "Aplikasi",
                    "Prototipe aplikasi beserta fitur dan model data",
                ),
            ),
        ),
    ),
)

DOCUMENT_STEP = StepDescriptor(
    id="need",
    title="Kebutuhan Dokumen",
    show_if=_for_task(TaskType.DOCUMENT),
    fields=(
        FieldDescriptor(
            id="goal",
            label="Tujuan",
            kind=FieldKind.TEXTAREA,
            required=True,
            helper_text="Contoh: tulis SOP, buat riset brief, desain API, skrip presentasi",
        ),
        FieldDescriptor(
            id="audience",
            label="Audiens",
            kind=FieldKind.TEXT,
            helper_text=(
                "Profil & tingkat teknis audiens. Contoh: Developer Senior, "
                "Manajer Produk non-teknis"
            ),
        ),
        FieldDescriptor(
            id="context",
            label="Konteks/Domain",
            kind=FieldKind.TEXTAREA,
            helper_text=(
                "Ringkasan domain/kendala. Contoh: Data keuangan, regulasi GDPR, "
                "brand voice ceria"
            ),
        ),
        FieldDescriptor(
            id="constraints",
            label="Batasan & Format",
            kind=FieldKind.TEXTAREA,
            helper_text=(
                "Panjang target, gaya, larangan, format keluaran. Contoh: Maksimal "
                "500 kata, format Markdown"
            ),
        ),
    ),
)

AGENT_STEP = StepDescriptor(
    id="agent",
    title="Spesifikasi Agen",
    show_if=_for_task(TaskType.AGENT),
    fields=(
        FieldDescriptor(
            id="agent_goal",
            label="Tujuan Agen",
            kind=FieldKind.TEXTAREA,
            required=True,
            helper_text="Contoh: memantau tiket support dan menyusun draf balasan",
        ),
        FieldDescriptor(
            id="agent_context",
            label="Konteks Operasional",
            kind=FieldKind.TEXTAREA,
            helper_text="Lingkungan kerja, sistem yang diakses, batasan kebijakan",
        ),
        FieldDescriptor(
            id="agent_triggers",
            label="Pemicu",
            kind=FieldKind.TEXTAREA,
            helper_text="Kapan agen mulai bekerja. Contoh: tiket baru, jadwal harian",
        ),
        FieldDescriptor(
            id="agent_success_criteria",
            label="Kriteria Sukses",
            kind=FieldKind.TEXTAREA,
            helper_text="Ukuran keberhasilan yang dapat diverifikasi",
        ),
        FieldDescriptor(
            id="agent_autonomy",
            label="Tingkat Otonomi",
            kind=FieldKind.RADIO,
            options=("diawasi", "semi-otonom", "otonom"),
            default="semi-otonom",
        ),
    ),
)

APPLICATION_STEP = StepDescriptor(
    id="application",
    title="Spesifikasi Aplikasi",
    show_if=_for_task(TaskType.APPLICATION),
    fields=(
        FieldDescriptor(
            id="app_description",
            label="Deskripsi Aplikasi",
            kind=FieldKind.TEXTAREA,
            required=True,
            helper_text="Masalah yang diselesaikan dan siapa penggunanya",
        ),
        FieldDescriptor(
            id="app_features",
            label="Fitur Utama",
            kind=FieldKind.TEXTAREA,
            helper_text="Daftar fitur inti, satu per baris",
        ),
        FieldDescriptor(
            id="app_data_model",
            label="Model Data",
            kind=FieldKind.TEXTAREA,
            helper_text="Entitas utama dan relasinya",
        ),
        FieldDescriptor(
            id="app_tech_stack",
            label="Tech Stack",
            kind=FieldKind.TEXT,
            helper_text="Contoh: React + FastAPI + PostgreSQL",
        ),
        FieldDescriptor(
            id="app_platform",
            label="Platform",
            kind=FieldKind.SELECT,
            options=("web", "mobile", "desktop"),
            default="web",
        ),
    ),
)

PREFERENCES_STEP = StepDescriptor(
    id="prefs",
    title="Preferensi",
    fields=(
        FieldDescriptor(
            id="language",
            label="Bahasa",
            kind=FieldKind.SELECT,
            options=("id", "en"),
            default="id",
        ),
        FieldDescriptor(
            id="need_citations",
            label="Butuh Sitasi?",
            kind=FieldKind.TOGGLE,
            default=False,
        ),
        FieldDescriptor(
            id="citation_style",
            label="Gaya Sitasi",
            kind=FieldKind.SELECT,
            options=("APA", "IEEE", "bebas"),
            default="APA",
            show_if=VisibilityRule(depends_on="need_citations", required_value="true"),
        ),
        FieldDescriptor(
            id="creativity_level",
            label="Tingkat Kreativitas",
            kind=FieldKind.RADIO,
            options=_LEVELS,
            default="sedang",
        ),
        FieldDescriptor(
            id="risk_tolerance",
            label="Toleransi Risiko",
            kind=FieldKind.RADIO,
            options=_LEVELS,
            default="sedang",
        ),
        FieldDescriptor(
            id="tools_available",
            label="Alat Tersedia",
            kind=FieldKind.CHECKBOX,
            options=("web_search", "calculator", "rag", "function_calling"),
        ),
    ),
)

FORM_STEPS: tuple[StepDescriptor, ...] = (
    TASK_STEP,
    DOCUMENT_STEP,
    AGENT_STEP,
    APPLICATION_STEP,
    PREFERENCES_STEP,
)

PREFERENCE_FIELDS: tuple[str, ...] = tuple(f.id for f in PREFERENCES_STEP.fields)

TASK_DEFINITIONS: tuple[TaskDefinition, ...] = (
    TaskDefinition(
        task_type=TaskType.DOCUMENT,
        display_name="Dokumen",
        description="Prompt untuk menghasilkan dokumen terstruktur",
        step_id=DOCUMENT_STEP.id,
        extraction_fields={
            "goal": "Tujuan utama dokumen yang ingin dihasilkan",
            "audience": "Profil dan tingkat teknis pembaca",
            "context": "Domain, latar belakang, dan kendala yang relevan",
            "constraints": "Batasan panjang, gaya, larangan, dan format keluaran",
        },
    ),
    TaskDefinition(
        task_type=TaskType.AGENT,
        display_name="Agen Otonom",
        description="Spesifikasi agen AI otonom beserta perilakunya",
        step_id=AGENT_STEP.id,
        extraction_fields={
            "agent_goal": "Tujuan yang harus dicapai agen",
            "agent_context": "Lingkungan operasional, sistem, dan kebijakan",
            "agent_triggers": "Peristiwa atau jadwal yang memicu agen",
            "agent_success_criteria": "Kriteria keberhasilan yang dapat diverifikasi",
        },
    ),
    TaskDefinition(
        task_type=TaskType.APPLICATION,
        display_name="Aplikasi",
        description="Prototipe aplikasi beserta spesifikasi antarmuka",
        step_id=APPLICATION_STEP.id,
        extraction_fields={
            "app_description": "Deskripsi aplikasi, masalah, dan penggunanya",
            "app_features": "Fitur utama aplikasi",
            "app_data_model": "Entitas data utama dan relasinya",
            "app_tech_stack": "Teknologi yang disarankan atau disebutkan",
        },
    ),
)
