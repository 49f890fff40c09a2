import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd

from tracker import config
from tracker.domain import (
    GOAL_CATEGORY_LABELS,
    GoalCategory,
    GoalForm,
    TransactionForm,
    TransactionType,
    categories_for,
)
from tracker.filters import search_transactions
from tracker.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_signed_amount,
    mask_amount,
    transaction_title,
    type_label,
)
from tracker.services import FinanceTracker
from tracker.storage import JsonFileStore

st.set_page_config(page_title="FinanceApp", layout="wide")

if "tracker" not in st.session_state:
    config.ensure_data_directories()
    tracker = FinanceTracker(JsonFileStore())
    for warning in tracker.load():
        st.warning(f"Stored data ignored: {warning}")
    st.session_state.tracker = tracker

tracker: FinanceTracker = st.session_state.tracker
summary = tracker.summary()

visible = st.sidebar.toggle("Show balance", value=st.session_state.get("balance_visible", True))
st.session_state["balance_visible"] = visible


def show_result(result, success: str) -> None:
    if result.applied:
        st.success(success)
    else:
        for error in result.errors:
            st.error(error["message"])
    for warning in result.warnings:
        st.warning(f"Saved in memory only: {warning}")


def transactions_df(transactions) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Date": format_date(t.date),
            "Description": transaction_title(t),
            "Category": t.category,
            "Type": type_label(t.type),
            "Amount": format_signed_amount(t),
        }
        for t in transactions
    ])


tab_dashboard, tab_transactions, tab_goals, tab_analytics = st.tabs(
    ["Dashboard", "Transações", "Metas", "Análises"]
)

with tab_dashboard:
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric(
            "Saldo Total",
            mask_amount(format_currency(summary.balance), visible),
            format_percentage(summary.balance_pct, signed=True) + " do total",
        )
    with k2:
        st.metric("Receitas", mask_amount(format_currency(summary.total_income), visible))
    with k3:
        st.metric("Despesas", mask_amount(format_currency(summary.total_expenses), visible))

    st.subheader("Transações Recentes")
    if summary.recent:
        st.dataframe(transactions_df(summary.recent), use_container_width=True, hide_index=True)
    else:
        st.info("Nenhuma transação registrada")

with tab_transactions:
    st.subheader("Nova Transação")
    form = tracker.transaction_form
    ttype = st.radio(
        "Tipo",
        list(TransactionType),
        format_func=type_label,
        index=list(TransactionType).index(form.type),
        horizontal=True,
    )
    with st.form("transaction_form"):
        amount = st.text_input("Valor", value=str(form.amount or ""), placeholder="0,00")
        category = st.selectbox("Categoria", [""] + list(categories_for(ttype)))
        description = st.text_input("Descrição", value=form.description)
        tx_date = st.date_input("Data", value=form.date)
        if st.form_submit_button("Adicionar"):
            form.type = ttype
            form.amount = amount
            form.category = category
            form.description = description
            form.date = tx_date
            show_result(tracker.add_transaction(), "Transação adicionada")

    st.subheader("Todas as Transações")
    query = st.text_input("Buscar transações...")
    found = search_transactions(tracker.snapshot.transactions, query)
    if found:
        st.dataframe(transactions_df(found), use_container_width=True, hide_index=True)
    else:
        st.info("Nenhuma transação encontrada")

with tab_goals:
    st.subheader("Nova Meta")
    goal_form = tracker.goal_form
    with st.form("goal_form"):
        name = st.text_input("Nome da Meta", value=goal_form.name, placeholder="Ex: Viagem para Europa")
        target = st.text_input("Valor Alvo", value=str(goal_form.target or ""), placeholder="0,00")
        goal_category = st.selectbox(
            "Categoria",
            [""] + [c.value for c in GoalCategory],
            format_func=lambda v: GOAL_CATEGORY_LABELS[GoalCategory(v)] if v else "Selecione uma categoria",
        )
        deadline = st.date_input("Prazo", value=None)
        if st.form_submit_button("Criar Meta"):
            goal_form.name = name
            goal_form.target = target
            goal_form.category = goal_category
            goal_form.deadline = deadline.isoformat() if deadline else ""
            show_result(tracker.add_goal(), "Meta criada")

    goals_by_id = {g.id: g for g in tracker.snapshot.goals}
    for progress in summary.goals:
        goal = goals_by_id.get(progress.goal_id)
        if goal is None:
            continue
        st.markdown(f"**{goal.name}** · {goal.category.label}")
        st.progress(min(float(progress.progress_pct), 100.0) / 100)
        c1, c2, c3 = st.columns(3)
        c1.write(f"Atual: {format_currency(goal.current)}")
        c2.write(f"Restante: {format_currency(progress.remaining)}")
        if progress.days_remaining is None:
            c3.write("Sem prazo")
        elif progress.is_overdue:
            c3.write(f"Atrasada há {-progress.days_remaining} dias")
        else:
            c3.write(f"{progress.days_remaining} dias restantes")
        new_current = st.text_input("Valor atual", key=f"current_{goal.id}")
        if st.button("Atualizar progresso", key=f"update_{goal.id}"):
            show_result(tracker.update_goal_progress(goal.id, new_current), "Progresso atualizado")
    if not summary.goals:
        st.info("Nenhuma meta criada")

with tab_analytics:
    st.subheader("Receitas vs Despesas por mês")
    monthly = pd.DataFrame([
        {
            "Mês": b.label,
            "Receitas": format_currency(b.income),
            "Despesas": format_currency(b.expenses),
            "Saldo": format_currency(b.balance),
        }
        for b in summary.monthly
    ])
    st.table(monthly)

    st.subheader("Despesas por Categoria")
    if summary.by_category:
        st.table(pd.DataFrame([
            {"Categoria": c.category, "Valor": format_currency(c.amount)}
            for c in summary.by_category
        ]))
    else:
        st.info("Nenhuma despesa registrada")

    counts = dict(summary.counts)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Transações", counts["transactions"])
    c2.metric("Receitas", counts["income"])
    c3.metric("Despesas", counts["expense"])
    c4.metric("Metas", counts["goals"])
