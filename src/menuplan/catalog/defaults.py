"""
Default household meal catalog.

Per-person portion variants of the same dish share a display name and a
variant_group. Options without owners are eaten identically by both.
"""

from menuplan.models import Condition, Ingredient, MealOption, Occasion, Person, SlotType

M = (Person.MICHAEL,)
J = (Person.JESSICA,)
BOTH = (Person.MICHAEL, Person.JESSICA)


def _option(
    id: str,
    name: str,
    description: str,
    type: SlotType,
    owners: tuple[Person, ...],
    ingredients: list[tuple[str, float, str]] | None = None,
    *,
    group: str | None = None,
    condition: Condition = Condition.ALWAYS,
    occasion: Occasion | None = None,
) -> MealOption:
    return MealOption(
        id=id,
        name=name,
        description=description,
        ingredients=tuple(Ingredient(name=n, amount=a, unit=u) for n, a, u in ingredients or []),
        type=type,
        condition=condition,
        owners=owners,
        variant_group=group,
        occasion=occasion,
    )


DEFAULT_OPTIONS: list[MealOption] = [
    # Breakfast
    _option("b1_m", "Toast Proteico + Marmellata", "2 Fette pane toast + 100g Philadelphia Protein + 10g Marmellata",
            SlotType.BREAKFAST, M, [("Pane Toast", 50, "g"), ("Philadelphia Protein", 100, "g"), ("Marmellata", 10, "g")], group="b1"),
    _option("b1_j", "Toast Proteico + Marmellata", "1 Fetta grande pane toast (30g) + 100g Philadelphia Protein + 10g Marmellata",
            SlotType.BREAKFAST, J, [("Pane Toast", 30, "g"), ("Philadelphia Protein", 100, "g"), ("Marmellata", 10, "g")], group="b1"),
    _option("b2_m", "Biscotti e Frutta", "35g Biscotti Integrali + 200g Frutta Fresca di stagione",
            SlotType.BREAKFAST, M, [("Biscotti Integrali", 35, "g"), ("Frutta di Stagione", 200, "g")], group="b2"),
    _option("b2_j", "Biscotti e Frutta", "35g Biscotti Integrali + 200g Frutta Fresca di stagione",
            SlotType.BREAKFAST, J, [("Biscotti Integrali", 35, "g"), ("Frutta di Stagione", 200, "g")], group="b2"),
    _option("b4_m", "Yogurt Greco e Avena", "200g Yogurt Greco Magro + 30g Granola + 10g Miele",
            SlotType.BREAKFAST, M, [("Yogurt Greco Magro", 200, "g"), ("Granola", 30, "g"), ("Miele", 10, "g")], group="b4"),
    _option("b4_j", "Yogurt Greco e Avena", "150g Yogurt Greco Magro + 30g Granola + 10g Miele",
            SlotType.BREAKFAST, J, [("Yogurt Greco Magro", 150, "g"), ("Granola", 30, "g"), ("Miele", 10, "g")], group="b4"),
    # Morning snack
    _option("sam1", "Frutta Fresca", "200g Frutta fresca di stagione",
            SlotType.SNACK_AM, BOTH, [("Frutta di Stagione", 200, "g")], condition=Condition.REST),
    _option("sam2", "Toast Burro d'Arachidi (Pre-Workout)", "1 Fetta pane tostato + 10g Burro d'Arachidi + 10g Marmellata",
            SlotType.SNACK_AM, M, [("Pane Toast", 25, "g"), ("Burro d'Arachidi", 10, "g"), ("Marmellata", 10, "g")],
            condition=Condition.TRAINING),
    # Lunch
    _option("l1_m", "Legumi e Verdure", "240g Legumi sgocciolati + 300g Verdure di stagione. NO OLIO.",
            SlotType.LUNCH, M, [("Legumi", 240, "g"), ("Verdura di Stagione", 300, "g")], group="l1"),
    _option("l1_j", "Legumi e Verdure", "240g Legumi + 300g Verdure + 10g Olio.",
            SlotType.LUNCH, J, [("Legumi", 240, "g"), ("Verdura di Stagione", 300, "g"), ("Olio EVO", 10, "g")], group="l1"),
    _option("l2_m", "Pasta/Riso/Cereali", "80g Pasta/Riso/Farro/Orzo + 100g Passata/Verdure. NO OLIO.",
            SlotType.LUNCH, M, [("Pasta", 80, "g"), ("Passata di Pomodoro", 100, "g")], group="l2"),
    _option("l2_j", "Pasta/Riso/Cereali", "60g Pasta/Riso/Farro/Orzo + 100g Passata/Verdure + 10g Olio.",
            SlotType.LUNCH, J, [("Pasta", 60, "g"), ("Passata di Pomodoro", 100, "g"), ("Olio EVO", 10, "g")], group="l2"),
    _option("l3_m_pollo", "Petto di Pollo e Verdure", "200g Petto di Pollo + 50g Pane + 300g Verdure. NO OLIO.",
            SlotType.LUNCH, M, [("Petto di Pollo", 200, "g"), ("Pane", 50, "g"), ("Verdura di Stagione", 300, "g")], group="l3_pollo"),
    _option("l3_j_pollo", "Petto di Pollo e Verdure", "200g Petto di Pollo + 50g Pane + 300g Verdure + 10g Olio.",
            SlotType.LUNCH, J, [("Petto di Pollo", 200, "g"), ("Pane", 50, "g"), ("Verdura di Stagione", 300, "g"), ("Olio EVO", 10, "g")],
            group="l3_pollo"),
    _option("l3_m_merluzzo", "Merluzzo e Verdure", "250g Merluzzo + 50g Pane + 300g Verdure.",
            SlotType.LUNCH, M, [("Merluzzo", 250, "g"), ("Pane", 50, "g"), ("Verdura di Stagione", 300, "g")], group="l3_merluzzo"),
    _option("l3_j_merluzzo", "Merluzzo e Verdure", "250g Merluzzo + 50g Pane + 300g Verdure + 10g Olio.",
            SlotType.LUNCH, J, [("Merluzzo", 250, "g"), ("Pane", 50, "g"), ("Verdura di Stagione", 300, "g"), ("Olio EVO", 10, "g")],
            group="l3_merluzzo"),
    _option("l_suoceri", "Pranzo dai Suoceri", "Gestisci le porzioni: preferisci proteine e verdure, evita bis e salse pesanti.",
            SlotType.LUNCH, BOTH, occasion=Occasion.RELATIVES),
    # Afternoon snack
    _option("spm_frutta", "Frutta Fresca", "200g Frutta Fresca di stagione",
            SlotType.SNACK_PM, BOTH, [("Frutta di Stagione", 200, "g")]),
    _option("spm_yogurt", "Yogurt Greco", "150g Yogurt Greco Magro",
            SlotType.SNACK_PM, BOTH, [("Yogurt Greco Magro", 150, "g")]),
    # Dinner
    _option("d1_m_pollo", "Pollo alla Piastra", "200g Pollo + 300g Verdure + 50g Pane + 10g Olio.",
            SlotType.DINNER, M, [("Petto di Pollo", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 50, "g")], group="d1_pollo"),
    _option("d1_j_pollo", "Pollo alla Piastra", "200g Pollo + 300g Verdure + 30g Pane + 10g Olio.",
            SlotType.DINNER, J, [("Petto di Pollo", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 30, "g")], group="d1_pollo"),
    _option("d1_m_manzo", "Tagliata di Manzo", "200g Manzo + 300g Verdure + 50g Pane + 10g Olio.",
            SlotType.DINNER, M, [("Manzo", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 50, "g")], group="d1_manzo"),
    _option("d1_j_manzo", "Tagliata di Manzo", "200g Manzo + 300g Verdure + 30g Pane + 10g Olio.",
            SlotType.DINNER, J, [("Manzo", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 30, "g")], group="d1_manzo"),
    _option("d1_m_salmone", "Salmone al Forno", "200g Salmone + 300g Verdure + 50g Pane + 10g Olio.",
            SlotType.DINNER, M, [("Salmone", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 50, "g")], group="d1_salmone"),
    _option("d1_j_salmone", "Salmone al Forno", "200g Salmone + 300g Verdure + 30g Pane + 10g Olio.",
            SlotType.DINNER, J, [("Salmone", 200, "g"), ("Verdura di Stagione", 300, "g"), ("Pane", 30, "g")], group="d1_salmone"),
    _option("d_uova_m", "Uova e Verdure", "3 Uova + 300g Verdure + 50g Pane + 10g Olio.",
            SlotType.DINNER, M, [("Uova", 3, "pz"), ("Verdura di Stagione", 300, "g"), ("Pane", 50, "g")], group="d_uova"),
    _option("d_uova_j", "Uova e Verdure", "2 Uova + 300g Verdure + 30g Pane + 10g Olio.",
            SlotType.DINNER, J, [("Uova", 2, "pz"), ("Verdura di Stagione", 300, "g"), ("Pane", 30, "g")], group="d_uova"),
    _option("d_amici", "Uscita con Amici", "Scegli opzioni magre, evita fritti e salse. Max 1 calice di vino.",
            SlotType.DINNER, BOTH, occasion=Occasion.SOCIAL),
    _option("d2", "Social / Pasto Libero (Controllato)", "Cena fuori? Niente alcool/aperitivo. Primo semplice o Secondo di carne magra.",
            SlotType.DINNER, BOTH, occasion=Occasion.SOCIAL),
]
