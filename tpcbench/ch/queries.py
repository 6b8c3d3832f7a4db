"""The 22 analytical queries of the CH-benCHmark workload."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping

PLACEHOLDER = "/*PLACEHOLDER*/"

_SUPPLIER_OF_STOCK = "MOD(s_w_id * s_i_id, 10000)"

_BODIES: Dict[str, str] = {
    "q1": """
SELECT ol_number,
       SUM(ol_quantity) AS sum_qty,
       SUM(ol_amount) AS sum_amount,
       AVG(ol_quantity) AS avg_qty,
       AVG(ol_amount) AS avg_amount,
       COUNT(*) AS count_order
  FROM order_line
 WHERE ol_delivery_d > '2007-01-02 00:00:00.000000'
 GROUP BY ol_number
 ORDER BY ol_number;""",
    "q2": f"""
SELECT s_suppkey, s_name, n_name, i_id, i_name, s_address, s_phone, s_comment
  FROM item, supplier, stock, nation, region,
       (SELECT s_i_id AS m_i_id, MIN(s_quantity) AS m_s_quantity
          FROM stock, supplier, nation, region
         WHERE {_SUPPLIER_OF_STOCK} = s_suppkey
           AND s_nationkey = n_nationkey
           AND n_regionkey = r_regionkey
           AND r_name LIKE 'EUROP%'
         GROUP BY s_i_id) m
 WHERE i_id = s_i_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND s_nationkey = n_nationkey
   AND n_regionkey = r_regionkey
   AND i_data LIKE '%b'
   AND r_name LIKE 'EUROP%'
   AND i_id = m_i_id
   AND s_quantity = m_s_quantity
 ORDER BY n_name, s_name, i_id;""",
    "q3": """
SELECT ol_o_id, ol_w_id, ol_d_id, SUM(ol_amount) AS revenue, o_entry_d
  FROM customer, new_order, orders, order_line
 WHERE c_state LIKE 'a%'
   AND c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND no_w_id = o_w_id AND no_d_id = o_d_id AND no_o_id = o_id
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND o_entry_d > '2007-01-02 00:00:00.000000'
 GROUP BY ol_o_id, ol_w_id, ol_d_id, o_entry_d
 ORDER BY revenue DESC, o_entry_d;""",
    "q4": """
SELECT o_ol_cnt, COUNT(*) AS order_count
  FROM orders
 WHERE o_entry_d >= '2007-01-02 00:00:00.000000'
   AND o_entry_d < '2032-01-02 00:00:00.000000'
   AND EXISTS (SELECT *
                 FROM order_line
                WHERE o_id = ol_o_id AND o_w_id = ol_w_id AND o_d_id = ol_d_id
                  AND ol_delivery_d >= o_entry_d)
 GROUP BY o_ol_cnt
 ORDER BY o_ol_cnt;""",
    "q5": f"""
SELECT n_name, SUM(ol_amount) AS revenue
  FROM customer, orders, order_line, stock, supplier, nation, region
 WHERE c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND ol_o_id = o_id AND ol_w_id = o_w_id AND ol_d_id = o_d_id
   AND ol_w_id = s_w_id AND ol_i_id = s_i_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND ASCII(SUBSTR(c_state, 1, 1)) - 65 = s_nationkey
   AND s_nationkey = n_nationkey
   AND n_regionkey = r_regionkey
   AND r_name = 'EUROPE'
   AND o_entry_d >= '2007-01-02 00:00:00.000000'
 GROUP BY n_name;""",
    "q6": """
SELECT SUM(ol_amount) AS revenue
  FROM order_line
 WHERE ol_delivery_d >= '1997-01-01 00:00:00'
   AND ol_delivery_d < '2030-01-01 00:00:00'
   AND ol_quantity BETWEEN 1 AND 100000;""",
    "q7": f"""
SELECT s_nationkey AS supp_nation,
       SUBSTR(c_state, 1, 1) AS cust_nation,
       EXTRACT(YEAR FROM o_entry_d) AS l_year,
       SUM(ol_amount) AS revenue
  FROM supplier, stock, order_line, orders, customer, nation n1, nation n2
 WHERE ol_supply_w_id = s_w_id AND ol_i_id = s_i_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND s_nationkey = n1.n_nationkey
   AND ASCII(SUBSTR(c_state, 1, 1)) - 65 = n2.n_nationkey
   AND ((n1.n_name = 'JAPAN' AND n2.n_name = 'CHINA')
        OR (n1.n_name = 'CHINA' AND n2.n_name = 'JAPAN'))
   AND ol_delivery_d BETWEEN '2007-01-02 00:00:00.000000' AND '2032-01-02 00:00:00.000000'
 GROUP BY s_nationkey, SUBSTR(c_state, 1, 1), EXTRACT(YEAR FROM o_entry_d)
 ORDER BY s_nationkey, cust_nation, l_year;""",
    "q8": f"""
SELECT EXTRACT(YEAR FROM o_entry_d) AS l_year,
       SUM(CASE WHEN n2.n_name = 'INDIA' THEN ol_amount ELSE 0 END) / SUM(ol_amount) AS mkt_share
  FROM item, supplier, stock, order_line, orders, customer, nation n1, nation n2, region
 WHERE i_id = s_i_id AND ol_i_id = s_i_id AND ol_supply_w_id = s_w_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND n1.n_nationkey = ASCII(SUBSTR(c_state, 1, 1)) - 65
   AND n1.n_regionkey = r_regionkey
   AND ol_i_id < 1000
   AND r_name = 'ASIA'
   AND s_nationkey = n2.n_nationkey
   AND o_entry_d BETWEEN '2007-01-02 00:00:00.000000' AND '2032-01-02 00:00:00.000000'
   AND i_id = ol_i_id
 GROUP BY EXTRACT(YEAR FROM o_entry_d)
 ORDER BY l_year;""",
    "q9": f"""
SELECT n_name, EXTRACT(YEAR FROM o_entry_d) AS l_year, SUM(ol_amount) AS sum_profit
  FROM item, stock, supplier, order_line, orders, nation
 WHERE ol_i_id = s_i_id AND ol_supply_w_id = s_w_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND ol_i_id = i_id
   AND s_nationkey = n_nationkey
   AND i_data LIKE '%BB'
 GROUP BY n_name, EXTRACT(YEAR FROM o_entry_d)
 ORDER BY n_name, l_year DESC;""",
    "q10": """
SELECT c_id, c_last, SUM(ol_amount) AS revenue, c_city, c_phone, n_name
  FROM customer, orders, order_line, nation
 WHERE c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND o_entry_d >= '2007-01-02 00:00:00.000000'
   AND o_entry_d <= ol_delivery_d
   AND n_nationkey = ASCII(SUBSTR(c_state, 1, 1)) - 65
 GROUP BY c_id, c_last, c_city, c_phone, n_name
 ORDER BY revenue DESC;""",
    "q11": f"""
SELECT s_i_id, SUM(s_order_cnt) AS ordercount
  FROM stock, supplier, nation
 WHERE {_SUPPLIER_OF_STOCK} = s_suppkey
   AND s_nationkey = n_nationkey
   AND n_name = 'CHINA'
 GROUP BY s_i_id
HAVING SUM(s_order_cnt) >
       (SELECT SUM(s_order_cnt) * .005
          FROM stock, supplier, nation
         WHERE {_SUPPLIER_OF_STOCK} = s_suppkey
           AND s_nationkey = n_nationkey
           AND n_name = 'CHINA')
 ORDER BY ordercount DESC;""",
    "q12": """
SELECT o_ol_cnt,
       SUM(CASE WHEN o_carrier_id = 1 OR o_carrier_id = 2 THEN 1 ELSE 0 END) AS high_line_count,
       SUM(CASE WHEN o_carrier_id <> 1 AND o_carrier_id <> 2 THEN 1 ELSE 0 END) AS low_line_count
  FROM orders, order_line
 WHERE ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
   AND o_entry_d <= ol_delivery_d
   AND ol_delivery_d < '2030-01-01 00:00:00.000000'
 GROUP BY o_ol_cnt
 ORDER BY o_ol_cnt;""",
    "q13": """
SELECT c_count, COUNT(*) AS custdist
  FROM (SELECT c_id, COUNT(o_id) AS c_count
          FROM customer LEFT OUTER JOIN orders
               ON (c_w_id = o_w_id AND c_d_id = o_d_id AND c_id = o_c_id AND o_carrier_id > 8)
         GROUP BY c_id) AS c_orders
 GROUP BY c_count
 ORDER BY custdist DESC, c_count DESC;""",
    "q14": """
SELECT 100.00 * SUM(CASE WHEN i_data LIKE 'PR%' THEN ol_amount ELSE 0 END)
       / (1 + SUM(ol_amount)) AS promo_revenue
  FROM order_line, item
 WHERE ol_i_id = i_id
   AND ol_delivery_d >= '2007-01-02 00:00:00.000000'
   AND ol_delivery_d < '2030-01-02 00:00:00.000000';""",
    "q15": """
SELECT s_suppkey, s_name, s_address, s_phone, total_revenue
  FROM supplier, revenue1
 WHERE s_suppkey = supplier_no
   AND total_revenue = (SELECT MAX(total_revenue) FROM revenue1)
 ORDER BY s_suppkey;""",
    "q16": f"""
SELECT i_name,
       SUBSTR(i_data, 1, 3) AS brand,
       i_price,
       COUNT(DISTINCT ({_SUPPLIER_OF_STOCK})) AS supplier_cnt
  FROM stock, item
 WHERE i_id = s_i_id
   AND i_data NOT LIKE 'zz%'
   AND ({_SUPPLIER_OF_STOCK} NOT IN
        (SELECT s_suppkey FROM supplier WHERE s_comment LIKE '%bad%'))
 GROUP BY i_name, SUBSTR(i_data, 1, 3), i_price
 ORDER BY supplier_cnt DESC;""",
    "q17": """
SELECT SUM(ol_amount) / 2.0 AS avg_yearly
  FROM order_line,
       (SELECT i_id, AVG(ol_quantity) AS a
          FROM item, order_line
         WHERE i_data LIKE '%b' AND ol_i_id = i_id
         GROUP BY i_id) t
 WHERE ol_i_id = t.i_id
   AND ol_quantity < t.a;""",
    "q18": """
SELECT c_last, c_id o_id, o_entry_d, o_ol_cnt, SUM(ol_amount)
  FROM customer, orders, order_line
 WHERE c_id = o_c_id AND c_w_id = o_w_id AND c_d_id = o_d_id
   AND ol_w_id = o_w_id AND ol_d_id = o_d_id AND ol_o_id = o_id
 GROUP BY o_id, o_w_id, o_d_id, c_id, c_last, o_entry_d, o_ol_cnt
HAVING SUM(ol_amount) > 200
 ORDER BY SUM(ol_amount) DESC, o_entry_d""",
    "q19": """
SELECT SUM(ol_amount) AS revenue
  FROM order_line, item
 WHERE (ol_i_id = i_id AND i_data LIKE '%a'
        AND ol_quantity >= 1 AND ol_quantity <= 10
        AND i_price BETWEEN 1 AND 400000
        AND ol_w_id IN (1, 2, 3))
    OR (ol_i_id = i_id AND i_data LIKE '%b'
        AND ol_quantity >= 1 AND ol_quantity <= 10
        AND i_price BETWEEN 1 AND 400000
        AND ol_w_id IN (1, 2, 4))
    OR (ol_i_id = i_id AND i_data LIKE '%c'
        AND ol_quantity >= 1 AND ol_quantity <= 10
        AND i_price BETWEEN 1 AND 400000
        AND ol_w_id IN (1, 5, 3));""",
    "q20": """
SELECT s_name, s_address
  FROM supplier, nation
 WHERE s_suppkey IN
       (SELECT MOD(s_i_id * s_w_id, 10000)
          FROM stock, order_line
         WHERE s_i_id IN (SELECT i_id FROM item WHERE i_data LIKE 'co%')
           AND ol_i_id = s_i_id
           AND ol_delivery_d > '2010-05-23 12:00:00'
         GROUP BY s_i_id, s_w_id, s_quantity
        HAVING 2 * s_quantity > SUM(ol_quantity))
   AND s_nationkey = n_nationkey
   AND n_name = 'CHINA'
 ORDER BY s_name;""",
    "q21": f"""
SELECT s_name, COUNT(*) AS numwait
  FROM supplier, order_line l1, orders, stock, nation
 WHERE ol_o_id = o_id AND ol_w_id = o_w_id AND ol_d_id = o_d_id
   AND ol_w_id = s_w_id AND ol_i_id = s_i_id
   AND {_SUPPLIER_OF_STOCK} = s_suppkey
   AND l1.ol_delivery_d > o_entry_d
   AND NOT EXISTS (SELECT *
                     FROM order_line l2
                    WHERE l2.ol_o_id = l1.ol_o_id
                      AND l2.ol_w_id = l1.ol_w_id
                      AND l2.ol_d_id = l1.ol_d_id
                      AND l2.ol_delivery_d > l1.ol_delivery_d)
   AND s_nationkey = n_nationkey
   AND n_name = 'CHINA'
 GROUP BY s_name
 ORDER BY numwait DESC, s_name;""",
    "q22": """
SELECT SUBSTR(c_state, 1, 1) AS country,
       COUNT(*) AS numcust,
       SUM(c_balance) AS totacctbal
  FROM customer
 WHERE SUBSTR(c_phone, 1, 1) IN ('1', '2', '3', '4', '5', '6', '7')
   AND c_balance > (SELECT AVG(c_balance)
                      FROM customer
                     WHERE c_balance > 0.00
                       AND SUBSTR(c_phone, 1, 1) IN ('1', '2', '3', '4', '5', '6', '7'))
   AND NOT EXISTS (SELECT *
                     FROM orders
                    WHERE o_c_id = c_id AND o_w_id = c_w_id AND o_d_id = c_d_id)
 GROUP BY SUBSTR(c_state, 1, 1)
 ORDER BY SUBSTR(c_state, 1, 1)""",
}

QUERIES: Mapping[str, str] = MappingProxyType(
    {name: f"\n{PLACEHOLDER} /*{name}*/{body}\n" for name, body in _BODIES.items()}
)


def get_query(name: str) -> str:
    """Return the SQL text of a query by name; raises ``KeyError`` if unknown."""
    try:
        return QUERIES[name]
    except KeyError:
        raise KeyError(f"unknown query: {name!r}") from None


def query_names() -> List[str]:
    """Names of all queries, from q1 to q22."""
    return list(QUERIES)