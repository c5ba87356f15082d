"""
Graph inspection helpers.
Print and summarize the structure of a Hypergraph; nothing here touches
evaluation state.
"""

import numpy as np
from typing import Dict, List
from collections import Counter


def _op_name(hg, node) -> str:
    return type(hg.edges[node.in_edge]).__name__


def _fan_outs(hg) -> List[int]:
    fan_outs = [0] * len(hg.nodes)
    for edge in hg.edges:
        for t in edge.tail:
            fan_outs[t] += 1
    return fan_outs


def graph_stats(hg) -> Dict:
    """
    Collect graph statistics (no printing).

    Returns:
        dict with node/edge counts, fan-in/fan-out, parameter edge count,
        evaluated node count and operator breakdown
    """
    if not hg.nodes:
        return {
            'nodes': 0,
            'edges': 0,
            'parameter_edges': 0,
            'evaluated': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(hg.nodes)
    fan_ins = [hg.edges[node.in_edge].arity() for node in hg.nodes]
    fan_outs = _fan_outs(hg)
    op_counter = Counter(_op_name(hg, node) for node in hg.nodes)

    return {
        'nodes': n_nodes,
        'edges': sum(fan_ins),
        'parameter_edges': len(hg.parameter_edges),
        'evaluated': hg.last_node_evaluated,
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def print_graph_summary(hg, detailed: bool = False) -> Dict:
    """
    Print a summary of the graph.

    Args:
        hg: Hypergraph
        detailed: Also list every node (graphs of at most 100 nodes)

    Returns:
        The dict from ``graph_stats``
    """
    stats = graph_stats(hg)
    if stats['nodes'] == 0:
        print("Empty computation graph")
        return stats

    print("\n" + "="*70)
    print("HYPERGRAPH SUMMARY")
    print("="*70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Parameter edges:    {stats['parameter_edges']:,}")
    print(f"Evaluated nodes:    {stats['evaluated']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_type:16s}: {count:6,} ({pct:5.1f}%)")

    if detailed and stats['nodes'] <= 100:
        print()
        print("="*70)
        print("DETAILED NODE LIST")
        print("="*70)
        print_computation_graph(hg, max_nodes=100, banner=False)

    print("="*70 + "\n")
    return stats


def print_computation_graph(hg, max_nodes: int = 20, banner: bool = True) -> None:
    """
    Print one line per node: ``v3 = v1 + v2`` plus its value when evaluated.
    """
    if banner:
        print("\n" + "="*70)
        print("HYPERGRAPH STRUCTURE")
        print("="*70)

    if not hg.nodes:
        print("Empty graph")
        return

    for node in hg.nodes[:max_nodes]:
        edge = hg.edges[node.in_edge]
        names = [hg.nodes[t].variable_name() for t in edge.tail]
        line = f"{node.variable_name():>6s} = {edge.as_string(names)}"
        if node.index < hg.last_node_evaluated and node.value is not None:
            line += f"   {np.array2string(node.value, precision=4, threshold=6)}"
        print(line)

    if len(hg.nodes) > max_nodes:
        print(f"... ({len(hg.nodes) - max_nodes} more nodes)")

    if banner:
        print("="*70 + "\n")
